"""Production pipeline endpoints."""
import uuid
from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from ..core.dependencies import get_production_manager_dep
from ..core.exceptions import IdeatorBaseException
from ..services import ProductionManager
from ..services.export_packager import archive_name
from ..utils.response_helpers import ResponseHelper

router = APIRouter(prefix="/productions", tags=["productions"])


@router.get("/{production_id}")
async def get_production(
    production_id: str,
    manager: ProductionManager = Depends(get_production_manager_dep)
):
    """Pipeline state, progress and accumulated assets."""
    request_id = str(uuid.uuid4())

    try:
        session = manager.get(production_id)
        return ResponseHelper.create_success_response(
            data=session.status().model_dump(mode="json"),
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{production_id}/clips")
async def start_clips(
    production_id: str,
    manager: ProductionManager = Depends(get_production_manager_dep)
):
    """Start video clip generation for a sampled subset of the storyboard."""
    request_id = str(uuid.uuid4())

    try:
        session = manager.get(production_id)
        await session.start_clips()
        return ResponseHelper.create_success_response(
            data=session.status().model_dump(mode="json"),
            request_id=request_id,
            status_code=202
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.post("/{production_id}/images/{slot}/regenerate")
async def regenerate_image(
    production_id: str,
    slot: int,
    manager: ProductionManager = Depends(get_production_manager_dep)
):
    """Regenerate one storyboard image, leaving the others untouched."""
    request_id = str(uuid.uuid4())

    try:
        session = manager.get(production_id)
        await session.regenerate_image(slot)
        return ResponseHelper.create_success_response(
            data=session.status().model_dump(mode="json"),
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.get("/{production_id}/assets/{position}")
async def get_asset(
    production_id: str,
    position: int,
    manager: ProductionManager = Depends(get_production_manager_dep)
):
    """Raw payload of one generated asset."""
    try:
        session = manager.get(production_id)
        content, media_type = session.asset_content(position)
        return ResponseHelper.create_binary_response(content, media_type)
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e)


@router.post("/{production_id}/assemble")
async def assemble_video(
    production_id: str,
    request: Request,
    manager: ProductionManager = Depends(get_production_manager_dep)
):
    """
    Assemble storyboard images and narration into a WebM video.

    An optional background track can be sent as the raw request body.
    """
    request_id = str(uuid.uuid4())

    try:
        session = manager.get(production_id)
        background_track = await request.body()
        path = await session.assemble(background_track or None)
        return FileResponse(path, media_type="video/webm", filename=path.name)
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.get("/{production_id}/export")
async def export_production(
    production_id: str,
    manager: ProductionManager = Depends(get_production_manager_dep)
):
    """Download everything produced so far as a zip archive."""
    request_id = str(uuid.uuid4())

    try:
        session = manager.get(production_id)
        archive = await session.export()
        return ResponseHelper.create_binary_response(
            archive, "application/zip", filename=archive_name(session.outline.title)
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.delete("/{production_id}")
async def delete_production(
    production_id: str,
    manager: ProductionManager = Depends(get_production_manager_dep)
):
    """Cancel in-flight work and discard the production."""
    request_id = str(uuid.uuid4())

    try:
        await manager.remove(production_id)
        return ResponseHelper.create_success_response(
            data={"deleted": production_id},
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)
