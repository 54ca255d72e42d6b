"""
Ideation workspace.

Holds one user's ideation session (language, concepts, the selected concept
or video, its analysis and outline) and keeps a snapshot of the favorites
list in sync with the settings store.
"""
import time
import uuid
from typing import Dict, List, Optional

from ..config.localization import normalize_language
from ..core.config import settings
from ..core.exceptions import ConfigError, NotFoundError, ValidationError
from ..models.concept import AnalysisResult, Concept, RecommendedTopic
from ..models.favorites import FavoriteProject
from ..models.production import ScriptOutline
from ..models.responses import WorkspaceState
from ..models.video import DiscoveredVideo
from ..utils.logging import CorrelatedLogger
from .generative_client import GenerativeContentClient
from .settings_store import SettingsStore, StoreEvent
from .youtube_client import YouTubeSearchClient


class IdeationWorkspace:
    """Per-user ideation state driven by the workspace API."""

    def __init__(
        self,
        workspace_id: str,
        store: SettingsStore,
        genai: GenerativeContentClient,
        youtube: YouTubeSearchClient,
        language: Optional[str] = None
    ):
        self.id = workspace_id
        self.store = store
        self.genai = genai
        self.youtube = youtube
        self.language = normalize_language(language or settings.default_language).value
        self.logger = CorrelatedLogger(__name__, workspace_id)

        self.topic = ""
        self.concepts: List[Concept] = []
        self.search_results: List[DiscoveredVideo] = []
        self.selected_concept: Optional[Concept] = None
        self.selected_video: Optional[DiscoveredVideo] = None
        self.analysis: Optional[AnalysisResult] = None
        self.outline: Optional[ScriptOutline] = None
        self.favorites: List[FavoriteProject] = store.list_favorites()

        self._unsubscribe = store.subscribe(StoreEvent.FAVORITES_CHANGED, self.refresh_favorites)

    @property
    def subject(self) -> Optional[str]:
        """Title of whatever is currently selected."""
        if self.selected_video is not None:
            return self.selected_video.title
        if self.selected_concept is not None:
            return self.selected_concept.title
        return None

    @property
    def favorite_id(self) -> Optional[str]:
        if self.selected_video is not None:
            return self.selected_video.id
        if self.selected_concept is not None:
            return self.selected_concept.id
        return None

    def _require_genai(self) -> None:
        if not self.store.has_credentials()["genai"]:
            raise ConfigError(SettingsStore.GENAI_KEY)

    def _require_analysis(self) -> AnalysisResult:
        if self.analysis is None:
            raise ValidationError("No analysis available; select a concept or video first")
        return self.analysis

    def _clear_selection(self) -> None:
        self.selected_concept = None
        self.selected_video = None
        self.analysis = None
        self.outline = None

    # Discovery

    async def generate_concepts(self, topic: str, language: Optional[str] = None) -> List[Concept]:
        if not topic or not topic.strip():
            raise ValidationError("Topic is required")
        if language:
            self.language = normalize_language(language).value
        self._require_genai()

        self.topic = topic.strip()
        self.concepts = []
        self.concepts = await self.genai.generate_concepts(self.topic, self.language)
        return self.concepts

    async def search_videos(self, query: str, duration: str = "any") -> List[DiscoveredVideo]:
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        self.search_results = await self.youtube.search(query.strip(), duration)
        return self.search_results

    # Selection and analysis

    async def select_concept(self, concept_id: str) -> AnalysisResult:
        concept = next((c for c in self.concepts if c.id == concept_id), None)
        if concept is None:
            raise NotFoundError("Concept", concept_id)

        self._clear_selection()
        self.selected_concept = concept
        self.analysis = await self.genai.analyze_concept(concept, self.language)
        return self.analysis

    async def select_video(self, video: DiscoveredVideo) -> AnalysisResult:
        self._require_genai()
        self._clear_selection()
        self.selected_video = video
        comments = await self.youtube.fetch_comments(video.id)
        self.analysis = await self.genai.analyze_video(video, comments, self.language)
        return self.analysis

    async def set_language(self, language: str) -> bool:
        """
        Switch the output language.

        When an analysis exists, only its SEO bundles are regenerated for the
        new language; keywords and topics are kept. Returns whether the
        language changed.
        """
        new_language = normalize_language(language).value
        if new_language == self.language:
            return False

        if self.analysis is not None and self.subject:
            seo = await self.genai.refresh_seo_strategy(
                self.subject, self.analysis.audience_reaction, new_language
            )
            self.analysis = self.analysis.model_copy(update={"seo_data": seo})
        self.language = new_language
        return True

    async def regenerate_topics(self) -> List[RecommendedTopic]:
        analysis = self._require_analysis()
        topics = await self.genai.regenerate_topics(self.subject or "", analysis, self.language)
        self.analysis = analysis.model_copy(update={"recommended_topics": topics})
        return topics

    async def select_keyword(self, keyword: str) -> ScriptOutline:
        context = self.analysis.audience_reaction if self.analysis else ""
        self.outline = await self.genai.generate_outline(keyword, context, self.language)
        return self.outline

    # Favorites

    def refresh_favorites(self) -> None:
        self.favorites = self.store.list_favorites()

    def is_favorite(self) -> bool:
        favorite_id = self.favorite_id
        return favorite_id is not None and self.store.is_favorite(favorite_id)

    def toggle_favorite(self) -> bool:
        """Favorite or unfavorite the current selection. Returns the new state."""
        favorite_id = self.favorite_id
        if favorite_id is None:
            raise ValidationError("Nothing selected to favorite")

        project = FavoriteProject(
            id=favorite_id,
            video=self.selected_video,
            concept=self.selected_concept,
            result=self.analysis,
            script_outline=self.outline,
            saved_at=int(time.time() * 1000)
        )
        return self.store.toggle_favorite(project)

    def open_favorite(self, favorite_id: str) -> FavoriteProject:
        """Restore a saved project into the workspace without any backend call."""
        favorite = self.store.get_favorite(favorite_id)
        if favorite is None:
            raise NotFoundError("Favorite", favorite_id)

        self._clear_selection()
        self.selected_video = favorite.video
        self.selected_concept = favorite.concept
        self.analysis = favorite.result
        self.outline = favorite.script_outline
        return favorite

    def state(self) -> WorkspaceState:
        return WorkspaceState(
            id=self.id,
            language=self.language,
            topic=self.topic,
            concepts=self.concepts,
            search_results=self.search_results,
            selected_concept=self.selected_concept,
            selected_video=self.selected_video,
            analysis=self.analysis,
            outline=self.outline,
            is_favorite=self.is_favorite(),
            favorites=self.favorites
        )

    def close(self) -> None:
        self._unsubscribe()


class WorkspaceManager:
    """Registry of open ideation workspaces."""

    def __init__(
        self,
        store: SettingsStore,
        genai: GenerativeContentClient,
        youtube: YouTubeSearchClient
    ):
        self.store = store
        self.genai = genai
        self.youtube = youtube
        self.logger = CorrelatedLogger(__name__)
        self._workspaces: Dict[str, IdeationWorkspace] = {}

    def create(self, language: Optional[str] = None) -> IdeationWorkspace:
        workspace_id = uuid.uuid4().hex[:12]
        workspace = IdeationWorkspace(workspace_id, self.store, self.genai, self.youtube, language)
        self._workspaces[workspace_id] = workspace
        self.logger.info(f"Workspace {workspace_id} opened ({workspace.language})")
        return workspace

    def get(self, workspace_id: str) -> IdeationWorkspace:
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            raise NotFoundError("Workspace", workspace_id)
        return workspace

    def close(self, workspace_id: str) -> None:
        self.get(workspace_id).close()
        del self._workspaces[workspace_id]

    def close_all(self) -> None:
        for workspace_id in list(self._workspaces):
            self.close(workspace_id)

    def __len__(self) -> int:
        return len(self._workspaces)
