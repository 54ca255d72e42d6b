"""Video-platform search service using the YouTube Data API."""
import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from ..core.config import settings
from ..core.exceptions import AuthError, ConfigError, UpstreamError, ValidationError
from ..models.video import Comment, DiscoveredVideo
from ..utils.logging import CorrelatedLogger
from .settings_store import SettingsStore

DURATION_FILTERS = ("any", "short", "long")


class YouTubeSearchClient:
    """Service for trend discovery on the video platform."""

    SERVICE = "YouTube Data API"

    def __init__(self, store: SettingsStore, base_url: Optional[str] = None):
        self.store = store
        self.base_url = (base_url or settings.youtube_base_url).rstrip("/")
        self.logger = CorrelatedLogger(__name__)

    def _get_api_key(self) -> str:
        api_key = self.store.get_credential(SettingsStore.YOUTUBE_KEY)
        if not api_key:
            raise ConfigError(SettingsStore.YOUTUBE_KEY)
        return api_key

    async def _get_json(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET an API endpoint and return the decoded JSON body (errors included)."""
        timeout = aiohttp.ClientTimeout(total=settings.http_timeout)
        url = f"{self.base_url}/{endpoint}"
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, params=params) as response:
                    return await response.json(content_type=None)
        except asyncio.TimeoutError:
            raise UpstreamError(self.SERVICE, f"{endpoint}: timed out after {settings.http_timeout}s")
        except (aiohttp.ClientError, ValueError) as e:
            raise UpstreamError(self.SERVICE, f"{endpoint}: {str(e)}")

    def _raise_for_error(self, data: Dict[str, Any]) -> None:
        error = data.get("error")
        if not error:
            return
        code = error.get("code")
        message = error.get("message") or "Unknown error"
        if code in (400, 401):
            raise AuthError(self.SERVICE, message)
        raise UpstreamError(self.SERVICE, message)

    async def search(self, query: str, duration: str = "any") -> List[DiscoveredVideo]:
        """
        Search videos and join per-video and per-channel statistics.

        Three chained lookups: search, video statistics, channel statistics.
        """
        if duration not in DURATION_FILTERS:
            raise ValidationError(f"Invalid duration filter: {duration}", {"allowed": list(DURATION_FILTERS)})

        api_key = self._get_api_key()
        self.logger.info(f"Searching videos for '{query}' (duration: {duration})")

        params = {
            "part": "snippet",
            "maxResults": settings.search_page_size,
            "q": query,
            "type": "video",
            "key": api_key,
        }
        if duration != "any":
            params["videoDuration"] = duration

        search_data = await self._get_json("search", params)
        self._raise_for_error(search_data)

        items = [item for item in search_data.get("items") or [] if item.get("id", {}).get("videoId")]
        if not items:
            return []

        video_ids = [item["id"]["videoId"] for item in items]
        channel_ids = list(dict.fromkeys(item["snippet"]["channelId"] for item in items))

        stats_data = await self._get_json("videos", {
            "part": "statistics", "id": ",".join(video_ids), "key": api_key
        })
        self._raise_for_error(stats_data)

        channel_data = await self._get_json("channels", {
            "part": "statistics", "id": ",".join(channel_ids), "key": api_key
        })
        self._raise_for_error(channel_data)

        view_counts = {
            v["id"]: self._to_int(v.get("statistics", {}).get("viewCount"))
            for v in stats_data.get("items") or []
        }
        subscriber_counts = {
            c["id"]: self._to_int(c.get("statistics", {}).get("subscriberCount"))
            for c in channel_data.get("items") or []
        }

        videos = []
        for item in items:
            snippet = item["snippet"]
            video_id = item["id"]["videoId"]
            channel_id = snippet["channelId"]
            videos.append(DiscoveredVideo(
                id=video_id,
                title=snippet.get("title", ""),
                thumbnail=self._thumbnail_url(snippet),
                published_at=snippet.get("publishedAt", ""),
                channel_title=snippet.get("channelTitle", ""),
                channel_id=channel_id,
                view_count=view_counts.get(video_id, 0),
                subscriber_count=subscriber_counts.get(channel_id, 0)
            ))

        self.logger.info(f"Found {len(videos)} videos for '{query}'")
        return videos

    async def fetch_comments(self, video_id: str) -> List[Comment]:
        """Fetch top comments by relevance. Best-effort: any failure yields []."""
        try:
            api_key = self._get_api_key()
            data = await self._get_json("commentThreads", {
                "part": "snippet",
                "videoId": video_id,
                "maxResults": settings.comment_page_size,
                "order": "relevance",
                "key": api_key,
            })
        except (ConfigError, UpstreamError) as e:
            self.logger.warning(f"Comments fetch failed for {video_id}: {e.message}")
            return []

        if data.get("error"):
            self.logger.warning(f"Comments unavailable for {video_id}: {data['error'].get('message')}")
            return []

        comments = []
        for item in data.get("items") or []:
            snippet = item.get("snippet", {}).get("topLevelComment", {}).get("snippet", {})
            comments.append(Comment(
                text=snippet.get("textDisplay", ""),
                author=snippet.get("authorDisplayName", ""),
                like_count=self._to_int(snippet.get("likeCount"))
            ))
        return comments

    @staticmethod
    def _thumbnail_url(snippet: Dict[str, Any]) -> str:
        thumbnails = snippet.get("thumbnails") or {}
        for quality in ("high", "medium", "default"):
            if quality in thumbnails:
                return thumbnails[quality].get("url", "")
        return ""

    @staticmethod
    def _to_int(value: Any) -> int:
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            return 0
