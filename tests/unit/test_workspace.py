"""Unit tests for the ideation workspace."""
from unittest.mock import AsyncMock

import pytest

from ideator.core.exceptions import (
    ConfigError, EmptyInputError, NotFoundError, UpstreamError, ValidationError
)
from ideator.models.concept import Concept, RecommendedTopic
from ideator.models.video import Comment, DiscoveredVideo
from ideator.services.generative_client import GenerativeContentClient
from ideator.services.workspace import WorkspaceManager
from ideator.services.youtube_client import YouTubeSearchClient


def _concept(concept_id: str) -> Concept:
    return Concept(
        id=concept_id, title=f"Concept {concept_id}", description="desc",
        style="vlog", target_audience="students", estimated_virality=70
    )


class TestIdeationWorkspace:
    """Workspace behavior with both backends mocked."""

    @pytest.fixture
    def genai(self, analysis, outline, seo_factory):
        client = AsyncMock(spec=GenerativeContentClient)
        client.generate_concepts.return_value = [_concept(c) for c in "abcd"]
        client.analyze_concept.return_value = analysis
        client.analyze_video.return_value = analysis
        client.refresh_seo_strategy.return_value = seo_factory("english")
        client.regenerate_topics.return_value = [RecommendedTopic(keyword="new", reason="fresh")]
        client.generate_outline.return_value = outline
        return client

    @pytest.fixture
    def youtube(self):
        client = AsyncMock(spec=YouTubeSearchClient)
        client.fetch_comments.return_value = [Comment(text="great video")]
        client.search.return_value = [DiscoveredVideo(id="v1", title="Found")]
        return client

    @pytest.fixture
    def manager(self, store, genai, youtube):
        store.set_credentials(genai_api_key="sk-test", youtube_api_key="yt-key")
        return WorkspaceManager(store, genai, youtube)

    @pytest.fixture
    def workspace(self, manager):
        return manager.create("Korean")

    @pytest.mark.asyncio
    async def test_generate_concepts(self, workspace, genai):
        concepts = await workspace.generate_concepts("  home cafe ", "en")

        assert len(concepts) == 4
        assert workspace.language == "English"
        genai.generate_concepts.assert_awaited_once_with("home cafe", "English")

    @pytest.mark.asyncio
    async def test_empty_topic(self, workspace, genai):
        with pytest.raises(ValidationError):
            await workspace.generate_concepts("   ")
        genai.generate_concepts.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_credentials_short_circuit(self, store, genai, youtube):
        workspace = WorkspaceManager(store, genai, youtube).create()

        with pytest.raises(ConfigError):
            await workspace.generate_concepts("home cafe")
        genai.generate_concepts.assert_not_called()

    @pytest.mark.asyncio
    async def test_select_video_without_credentials(self, store, genai, youtube):
        workspace = WorkspaceManager(store, genai, youtube).create()

        with pytest.raises(ConfigError):
            await workspace.select_video(DiscoveredVideo(id="v9", title="Trending"))
        youtube.fetch_comments.assert_not_called()
        genai.analyze_video.assert_not_called()

    @pytest.mark.asyncio
    async def test_select_concept(self, workspace, genai, analysis):
        await workspace.generate_concepts("home cafe")

        result = await workspace.select_concept("c")

        assert result == analysis
        assert workspace.selected_concept.id == "c"
        assert workspace.subject == "Concept c"

    @pytest.mark.asyncio
    async def test_select_unknown_concept(self, workspace):
        with pytest.raises(NotFoundError):
            await workspace.select_concept("zzz")

    @pytest.mark.asyncio
    async def test_select_video_analyzes_comments(self, workspace, genai, youtube):
        video = DiscoveredVideo(id="v9", title="Trending")

        await workspace.select_video(video)

        youtube.fetch_comments.assert_awaited_once_with("v9")
        genai.analyze_video.assert_awaited_once()
        assert workspace.selected_video == video
        assert workspace.selected_concept is None

    @pytest.mark.asyncio
    async def test_select_video_without_comments(self, workspace, genai, youtube):
        youtube.fetch_comments.return_value = []
        genai.analyze_video.side_effect = EmptyInputError("Trending", "Video has no comments to analyze")

        with pytest.raises(EmptyInputError):
            await workspace.select_video(DiscoveredVideo(id="v9", title="Trending"))
        assert workspace.analysis is None

    @pytest.mark.asyncio
    async def test_language_switch_refreshes_seo_once(self, workspace, genai, analysis):
        await workspace.generate_concepts("home cafe")
        await workspace.select_concept("a")

        changed = await workspace.set_language("English")

        assert changed is True
        genai.refresh_seo_strategy.assert_awaited_once_with(
            "Concept a", analysis.audience_reaction, "English"
        )
        assert workspace.analysis.seo_data.short.youtube.title == "english title"
        assert workspace.analysis.frequent_keywords == analysis.frequent_keywords
        assert workspace.analysis.recommended_topics == analysis.recommended_topics

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_language(self, workspace, genai, analysis):
        await workspace.generate_concepts("home cafe")
        await workspace.select_concept("a")
        genai.refresh_seo_strategy.side_effect = UpstreamError("Generative backend", "quota")

        with pytest.raises(UpstreamError):
            await workspace.set_language("English")

        assert workspace.language == "Korean"
        assert workspace.analysis.seo_data == analysis.seo_data

    @pytest.mark.asyncio
    async def test_same_language_does_not_refresh(self, workspace, genai):
        await workspace.generate_concepts("home cafe")
        await workspace.select_concept("a")

        assert await workspace.set_language("ko") is False
        genai.refresh_seo_strategy.assert_not_called()

    @pytest.mark.asyncio
    async def test_language_switch_without_analysis(self, workspace, genai):
        assert await workspace.set_language("Japanese") is True
        genai.refresh_seo_strategy.assert_not_called()

    @pytest.mark.asyncio
    async def test_regenerate_topics_keeps_rest(self, workspace, analysis):
        await workspace.generate_concepts("home cafe")
        await workspace.select_concept("a")

        await workspace.regenerate_topics()

        assert [t.keyword for t in workspace.analysis.recommended_topics] == ["new"]
        assert workspace.analysis.seo_data == analysis.seo_data

    @pytest.mark.asyncio
    async def test_regenerate_topics_requires_analysis(self, workspace):
        with pytest.raises(ValidationError):
            await workspace.regenerate_topics()

    @pytest.mark.asyncio
    async def test_select_keyword_uses_analysis_context(self, workspace, genai, analysis, outline):
        await workspace.generate_concepts("home cafe")
        await workspace.select_concept("a")

        result = await workspace.select_keyword("5 minute pasta")

        assert result == outline
        genai.generate_outline.assert_awaited_once_with(
            "5 minute pasta", analysis.audience_reaction, "Korean"
        )

    @pytest.mark.asyncio
    async def test_favorite_roundtrip(self, workspace, store):
        await workspace.select_video(DiscoveredVideo(id="v9", title="Trending"))
        await workspace.select_keyword("5 minute pasta")
        before = store.list_favorites()

        assert workspace.toggle_favorite() is True
        assert workspace.is_favorite()
        assert [f.id for f in workspace.favorites] == ["v9"]
        assert workspace.favorites[0].script_outline == workspace.outline

        assert workspace.toggle_favorite() is False
        assert store.list_favorites() == before
        assert workspace.favorites == before

    def test_toggle_without_selection(self, workspace):
        with pytest.raises(ValidationError):
            workspace.toggle_favorite()

    @pytest.mark.asyncio
    async def test_favorites_snapshot_follows_other_workspaces(self, manager):
        first = manager.create()
        second = manager.create()
        await first.select_video(DiscoveredVideo(id="v1", title="One"))

        first.toggle_favorite()

        assert [f.id for f in second.favorites] == ["v1"]

    @pytest.mark.asyncio
    async def test_closed_workspace_stops_listening(self, manager):
        first = manager.create()
        second = manager.create()
        manager.close(second.id)
        await first.select_video(DiscoveredVideo(id="v1", title="One"))

        first.toggle_favorite()

        assert second.favorites == []
        with pytest.raises(NotFoundError):
            manager.get(second.id)

    @pytest.mark.asyncio
    async def test_open_favorite_restores_state(self, workspace, genai, analysis, outline):
        await workspace.select_video(DiscoveredVideo(id="v9", title="Trending"))
        await workspace.select_keyword("5 minute pasta")
        workspace.toggle_favorite()

        other = WorkspaceManager(workspace.store, workspace.genai, workspace.youtube).create()
        favorite = other.open_favorite("v9")

        assert favorite.id == "v9"
        assert other.selected_video.id == "v9"
        assert other.analysis == analysis
        assert other.outline == outline
        assert other.state().is_favorite is True

    def test_open_unknown_favorite(self, workspace):
        with pytest.raises(NotFoundError):
            workspace.open_favorite("missing")

    @pytest.mark.asyncio
    async def test_search_requires_query(self, workspace, youtube):
        with pytest.raises(ValidationError):
            await workspace.search_videos(" ")

        results = await workspace.search_videos("pasta", "short")
        assert results[0].id == "v1"
        youtube.search.assert_awaited_once_with("pasta", "short")
