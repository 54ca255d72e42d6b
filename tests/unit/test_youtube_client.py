"""Unit tests for YouTubeSearchClient."""
import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from ideator.core.exceptions import AuthError, ConfigError, UpstreamError, ValidationError
from ideator.services.youtube_client import YouTubeSearchClient


SEARCH_RESPONSE = {
    "items": [
        {
            "id": {"videoId": "vid1"},
            "snippet": {
                "title": "First video",
                "channelId": "chan1",
                "channelTitle": "Channel One",
                "publishedAt": "2024-01-01T00:00:00Z",
                "thumbnails": {"medium": {"url": "https://img/1m.jpg"}, "default": {"url": "https://img/1d.jpg"}},
            },
        },
        {
            "id": {"videoId": "vid2"},
            "snippet": {
                "title": "Second video",
                "channelId": "chan2",
                "channelTitle": "Channel Two",
                "publishedAt": "2024-02-01T00:00:00Z",
                "thumbnails": {"high": {"url": "https://img/2h.jpg"}},
            },
        },
        {"id": {"kind": "youtube#channel"}, "snippet": {"title": "Not a video"}},
    ]
}

VIDEOS_RESPONSE = {
    "items": [
        {"id": "vid1", "statistics": {"viewCount": "25000"}},
        {"id": "vid2", "statistics": {"viewCount": "300"}},
    ]
}

CHANNELS_RESPONSE = {
    "items": [
        {"id": "chan1", "statistics": {"subscriberCount": "1000"}},
        {"id": "chan2", "statistics": {"hiddenSubscriberCount": True}},
    ]
}


class _StalledSession:
    """Session stand-in whose requests hit the client timeout."""

    def __init__(self, *args, **kwargs):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def get(self, *args, **kwargs):
        raise asyncio.TimeoutError()


def _router(responses):
    async def get_json(endpoint, params):
        return responses[endpoint]
    return get_json


class TestYouTubeSearchClient:
    """Test cases for YouTubeSearchClient."""

    @pytest.fixture
    def client(self, store):
        store.set_credentials(youtube_api_key="yt-key")
        return YouTubeSearchClient(store)

    @pytest.mark.asyncio
    async def test_search_joins_statistics(self, client):
        responses = {"search": SEARCH_RESPONSE, "videos": VIDEOS_RESPONSE, "channels": CHANNELS_RESPONSE}

        with patch.object(client, "_get_json", side_effect=_router(responses)) as mock_get:
            videos = await client.search("pasta")

        assert [v.id for v in videos] == ["vid1", "vid2"]
        first, second = videos
        assert first.view_count == 25000
        assert first.subscriber_count == 1000
        assert first.efficiency_ratio == pytest.approx(2500.0)
        assert first.thumbnail == "https://img/1m.jpg"
        assert second.thumbnail == "https://img/2h.jpg"
        assert second.subscriber_count == 0
        assert second.efficiency_ratio == 0.0

        endpoints = [c.args[0] for c in mock_get.call_args_list]
        assert endpoints == ["search", "videos", "channels"]
        search_params = mock_get.call_args_list[0].args[1]
        assert search_params["key"] == "yt-key"
        assert "videoDuration" not in search_params

    @pytest.mark.asyncio
    async def test_search_duration_filter(self, client):
        with patch.object(client, "_get_json", AsyncMock(return_value={"items": []})) as mock_get:
            videos = await client.search("pasta", "short")

        assert videos == []
        assert mock_get.call_args.args[1]["videoDuration"] == "short"

    @pytest.mark.asyncio
    async def test_invalid_duration(self, client):
        with pytest.raises(ValidationError):
            await client.search("pasta", "medium-ish")

    @pytest.mark.asyncio
    async def test_missing_key(self, store):
        client = YouTubeSearchClient(store)

        with pytest.raises(ConfigError):
            await client.search("pasta")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", [400, 401])
    async def test_auth_errors(self, client, code):
        body = {"error": {"code": code, "message": "API key not valid"}}

        with patch.object(client, "_get_json", AsyncMock(return_value=body)):
            with pytest.raises(AuthError) as exc_info:
                await client.search("pasta")

        assert "API key not valid" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_quota_error(self, client):
        body = {"error": {"code": 403, "message": "quotaExceeded"}}

        with patch.object(client, "_get_json", AsyncMock(return_value=body)):
            with pytest.raises(UpstreamError) as exc_info:
                await client.search("pasta")

        assert "quotaExceeded" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_fetch_comments(self, client):
        body = {"items": [
            {"snippet": {"topLevelComment": {"snippet": {
                "textDisplay": "Loved it", "authorDisplayName": "ana", "likeCount": 12
            }}}},
            {"snippet": {"topLevelComment": {"snippet": {"textDisplay": "Meh"}}}},
        ]}

        with patch.object(client, "_get_json", AsyncMock(return_value=body)) as mock_get:
            comments = await client.fetch_comments("vid1")

        assert [c.text for c in comments] == ["Loved it", "Meh"]
        assert comments[0].like_count == 12
        params = mock_get.call_args.args[1]
        assert params["order"] == "relevance"
        assert params["maxResults"] == 50

    @pytest.mark.asyncio
    async def test_fetch_comments_disabled(self, client):
        body = {"error": {"code": 403, "message": "commentsDisabled"}}

        with patch.object(client, "_get_json", AsyncMock(return_value=body)):
            assert await client.fetch_comments("vid1") == []

    @pytest.mark.asyncio
    async def test_fetch_comments_network_failure(self, client):
        failure = AsyncMock(side_effect=UpstreamError("YouTube Data API", "timeout"))

        with patch.object(client, "_get_json", failure):
            assert await client.fetch_comments("vid1") == []

    @pytest.mark.asyncio
    async def test_fetch_comments_without_key(self, store):
        assert await YouTubeSearchClient(store).fetch_comments("vid1") == []

    @pytest.mark.asyncio
    async def test_fetch_comments_timeout(self, client):
        with patch("ideator.services.youtube_client.aiohttp.ClientSession", _StalledSession):
            assert await client.fetch_comments("vid1") == []

    @pytest.mark.asyncio
    async def test_search_timeout_is_upstream_error(self, client):
        with patch("ideator.services.youtube_client.aiohttp.ClientSession", _StalledSession):
            with pytest.raises(UpstreamError) as exc_info:
                await client.search("pasta")

        assert "timed out" in exc_info.value.message
