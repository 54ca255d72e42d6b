"""Video-platform data models."""
from pydantic import BaseModel, computed_field


class DiscoveredVideo(BaseModel):
    """Metadata for an externally sourced video."""
    id: str
    title: str
    thumbnail: str = ""
    published_at: str = ""
    channel_title: str = ""
    channel_id: str = ""
    view_count: int = 0
    subscriber_count: int = 0

    model_config = {"frozen": True}

    @computed_field
    @property
    def efficiency_ratio(self) -> float:
        """Views per subscriber as a percentage; 0 when the channel has no subscribers."""
        if self.subscriber_count > 0:
            return max(0.0, self.view_count / self.subscriber_count * 100)
        return 0.0


class Comment(BaseModel):
    """A top-level viewer comment."""
    text: str
    author: str = ""
    like_count: int = 0
