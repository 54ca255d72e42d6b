"""Ideation workspace endpoints."""
import time
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, status

from ..core.dependencies import get_workspace_manager_dep, get_production_manager_dep
from ..core.exceptions import IdeatorBaseException, ValidationError
from ..models.requests import (
    WorkspaceCreateRequest, ConceptRequest, VideoSelectRequest,
    LanguageRequest, OutlineRequest, ProductionRequest
)
from ..services import WorkspaceManager, ProductionManager
from ..utils.response_helpers import ResponseHelper

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.post("")
async def create_workspace(
    request: Optional[WorkspaceCreateRequest] = None,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Open a new ideation workspace."""
    request_id = str(uuid.uuid4())

    try:
        workspace = manager.create(request.language if request else None)
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id,
            status_code=status.HTTP_201_CREATED
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.get("/{workspace_id}")
async def get_workspace(
    workspace_id: str,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Current workspace state."""
    request_id = str(uuid.uuid4())

    try:
        workspace = manager.get(workspace_id)
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.delete("/{workspace_id}")
async def close_workspace(
    workspace_id: str,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Close a workspace and stop its favorites subscription."""
    request_id = str(uuid.uuid4())

    try:
        manager.close(workspace_id)
        return ResponseHelper.create_success_response(
            data={"closed": workspace_id},
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{workspace_id}/concepts")
async def generate_concepts(
    workspace_id: str,
    request: ConceptRequest,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Generate four concepts for a topic."""
    request_id = str(uuid.uuid4())
    started_at = time.perf_counter()

    try:
        workspace = manager.get(workspace_id)
        await workspace.generate_concepts(request.topic, request.language)
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id,
            processing_time_ms=ResponseHelper.elapsed_ms(started_at)
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{workspace_id}/concepts/{concept_id}/select")
async def select_concept(
    workspace_id: str,
    concept_id: str,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Select a concept and analyze it."""
    request_id = str(uuid.uuid4())
    started_at = time.perf_counter()

    try:
        workspace = manager.get(workspace_id)
        await workspace.select_concept(concept_id)
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id,
            processing_time_ms=ResponseHelper.elapsed_ms(started_at)
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{workspace_id}/videos/select")
async def select_video(
    workspace_id: str,
    request: VideoSelectRequest,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Select a discovered video and analyze its comments."""
    request_id = str(uuid.uuid4())
    started_at = time.perf_counter()

    try:
        workspace = manager.get(workspace_id)
        await workspace.select_video(request.video)
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id,
            processing_time_ms=ResponseHelper.elapsed_ms(started_at)
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.put("/{workspace_id}/language")
async def set_language(
    workspace_id: str,
    request: LanguageRequest,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Switch output language; refreshes SEO data of an existing analysis."""
    request_id = str(uuid.uuid4())

    try:
        workspace = manager.get(workspace_id)
        await workspace.set_language(request.language)
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{workspace_id}/topics/regenerate")
async def regenerate_topics(
    workspace_id: str,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Regenerate the recommended topics of the current analysis."""
    request_id = str(uuid.uuid4())

    try:
        workspace = manager.get(workspace_id)
        await workspace.regenerate_topics()
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{workspace_id}/outline")
async def generate_outline(
    workspace_id: str,
    request: OutlineRequest,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Generate a script outline for a recommended keyword."""
    request_id = str(uuid.uuid4())

    try:
        workspace = manager.get(workspace_id)
        await workspace.select_keyword(request.keyword)
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{workspace_id}/favorite")
async def toggle_favorite(
    workspace_id: str,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Favorite or unfavorite the current selection."""
    request_id = str(uuid.uuid4())

    try:
        workspace = manager.get(workspace_id)
        is_favorite = workspace.toggle_favorite()
        return ResponseHelper.create_success_response(
            data={"is_favorite": is_favorite, "favorite_count": len(workspace.favorites)},
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{workspace_id}/favorites/{favorite_id}/open")
async def open_favorite(
    workspace_id: str,
    favorite_id: str,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep)
):
    """Restore a saved project into the workspace."""
    request_id = str(uuid.uuid4())

    try:
        workspace = manager.get(workspace_id)
        workspace.open_favorite(favorite_id)
        return ResponseHelper.create_success_response(
            data=workspace.state().model_dump(mode="json"),
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{workspace_id}/productions")
async def start_production(
    workspace_id: str,
    request: ProductionRequest,
    manager: WorkspaceManager = Depends(get_workspace_manager_dep),
    productions: ProductionManager = Depends(get_production_manager_dep)
):
    """Start a production run from the workspace's outline."""
    request_id = str(uuid.uuid4())

    try:
        workspace = manager.get(workspace_id)
        if workspace.outline is None:
            raise ValidationError("Generate a script outline before starting production")

        parameters = request.parameters
        if "language" not in parameters.model_fields_set:
            parameters = parameters.model_copy(update={"language": workspace.language})

        session = productions.create(workspace.outline, parameters, workspace.analysis)
        await session.start()
        return ResponseHelper.create_success_response(
            data=session.status().model_dump(mode="json"),
            request_id=request_id,
            status_code=status.HTTP_202_ACCEPTED
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)
