"""Health check and monitoring endpoints."""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.dependencies import (
    get_settings_store_dep, get_workspace_manager_dep, get_production_manager_dep
)
from ..models.responses import HealthData, DependencyStatus
from ..services import SettingsStore, WorkspaceManager, ProductionManager

router = APIRouter(tags=["health"])

@router.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"{settings.api_title} is running"}

@router.get("/health")
async def health_check(
    store: SettingsStore = Depends(get_settings_store_dep),
    workspaces: WorkspaceManager = Depends(get_workspace_manager_dep),
    productions: ProductionManager = Depends(get_production_manager_dep)
):
    """
    Health check endpoint with credential status and session counts
    """
    credentials = store.has_credentials()

    dependencies = DependencyStatus(
        generative_backend="configured" if credentials["genai"] else "not_configured",
        video_platform="configured" if credentials["youtube"] else "not_configured",
        settings_store="healthy" if store.path.exists() else "not_initialized"
    )

    health_data = HealthData(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.api_version,
        dependencies=dependencies,
        active_workspaces=len(workspaces),
        active_productions=len(productions)
    )

    return JSONResponse(
        status_code=200,
        content=health_data.model_dump()
    )
