"""Favorite project snapshot model."""
from typing import Optional
from pydantic import BaseModel

from .concept import AnalysisResult, Concept
from .production import ScriptOutline
from .video import DiscoveredVideo


class FavoriteProject(BaseModel):
    """A persisted snapshot of a favorited ideation result."""
    id: str
    video: Optional[DiscoveredVideo] = None
    concept: Optional[Concept] = None
    result: Optional[AnalysisResult] = None
    script_outline: Optional[ScriptOutline] = None
    saved_at: int

    @property
    def title(self) -> str:
        if self.video:
            return self.video.title
        if self.concept:
            return self.concept.title
        return self.id
