"""Trend discovery endpoints backed by the video platform."""
import time
import uuid
from fastapi import APIRouter, Depends, Query

from ..core.dependencies import get_youtube_client_dep
from ..core.exceptions import IdeatorBaseException, ValidationError
from ..services import YouTubeSearchClient
from ..utils.response_helpers import ResponseHelper

router = APIRouter(tags=["discovery"])


@router.get("/search")
async def search_videos(
    q: str = Query("", description="Search keyword"),
    duration: str = Query("any", description="Duration filter: any, short or long"),
    client: YouTubeSearchClient = Depends(get_youtube_client_dep)
):
    """Search videos, sorted as the platform returns them, with efficiency ratios."""
    request_id = str(uuid.uuid4())
    started_at = time.perf_counter()

    try:
        if not q.strip():
            raise ValidationError("Search query is required")

        videos = await client.search(q.strip(), duration)
        return ResponseHelper.create_success_response(
            data=[video.model_dump(mode="json") for video in videos],
            request_id=request_id,
            processing_time_ms=ResponseHelper.elapsed_ms(started_at)
        )
    except IdeatorBaseException as e:
        return ResponseHelper.create_error_from_exception(e, request_id)


@router.get("/videos/{video_id}/comments")
async def get_comments(
    video_id: str,
    client: YouTubeSearchClient = Depends(get_youtube_client_dep)
):
    """Top comments by relevance. Empty when comments are unavailable."""
    request_id = str(uuid.uuid4())
    comments = await client.fetch_comments(video_id)

    return ResponseHelper.create_success_response(
        data=[comment.model_dump() for comment in comments],
        request_id=request_id
    )
