"""Settings and favorites endpoints."""
import uuid
from fastapi import APIRouter, Depends

from ..config.localization import get_supported_languages
from ..core.config import settings, ProductionConfig
from ..core.dependencies import get_settings_store_dep
from ..core.exceptions import IdeatorBaseException, NotFoundError
from ..models.requests import CredentialsUpdateRequest
from ..services import SettingsStore
from ..services.production import get_clip_count
from ..utils.response_helpers import ResponseHelper

router = APIRouter(tags=["settings"])


def _format_options(is_short_form: bool) -> dict:
    low, high = ProductionConfig.get_image_count_range(is_short_form)
    return {
        "aspect_ratio": ProductionConfig.get_aspect_ratio(is_short_form),
        "image_count": {"min": low, "max": high},
        "clip_count": get_clip_count(is_short_form),
    }


@router.get("/settings")
async def get_settings(store: SettingsStore = Depends(get_settings_store_dep)):
    """Credential status plus the options the production form offers."""
    request_id = str(uuid.uuid4())

    return ResponseHelper.create_success_response(
        data={
            "credentials": store.has_credentials(),
            "languages": get_supported_languages(),
            "default_language": settings.default_language,
            "formats": {
                "short": _format_options(True),
                "long": _format_options(False),
            },
        },
        request_id=request_id
    )


@router.put("/settings/credentials")
async def update_credentials(
    request: CredentialsUpdateRequest,
    store: SettingsStore = Depends(get_settings_store_dep)
):
    """Store API credentials. Omitted keys are left unchanged."""
    request_id = str(uuid.uuid4())

    try:
        store.set_credentials(request.genai_api_key, request.youtube_api_key)
        return ResponseHelper.create_success_response(
            data={"credentials": store.has_credentials()},
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.get("/favorites")
async def list_favorites(store: SettingsStore = Depends(get_settings_store_dep)):
    """List saved projects, most recent first."""
    request_id = str(uuid.uuid4())
    favorites = store.list_favorites()

    return ResponseHelper.create_success_response(
        data=[favorite.model_dump(mode="json") for favorite in favorites],
        request_id=request_id
    )


@router.delete("/favorites/{favorite_id}")
async def delete_favorite(
    favorite_id: str,
    store: SettingsStore = Depends(get_settings_store_dep)
):
    """Remove a saved project."""
    request_id = str(uuid.uuid4())

    try:
        if not store.remove_favorite(favorite_id):
            raise NotFoundError("Favorite", favorite_id)
        return ResponseHelper.create_success_response(
            data={"removed": favorite_id},
            request_id=request_id
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)
