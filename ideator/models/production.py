"""Production data models: outlines, plans, assets and pipeline state."""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from ..core.config import ProductionConfig
from ..utils.timecode import parse_timecode, normalize_timecode


class OutlineSection(BaseModel):
    """A labeled section of a script outline."""
    label: str
    content: str

    model_config = {"frozen": True}


class ScriptOutline(BaseModel):
    """Title plus ordered outline sections."""
    title: str
    sections: List[OutlineSection] = Field(default_factory=list)

    model_config = {"frozen": True}


class SubtitleSegment(BaseModel):
    """Individual subtitle cue with SRT-style timing."""
    index: int
    start: str = Field(..., description="Start timestamp (HH:MM:SS,mmm)")
    end: str = Field(..., description="End timestamp (HH:MM:SS,mmm)")
    text: str

    @field_validator("start", "end")
    @classmethod
    def validate_timecode(cls, v):
        return normalize_timecode(v)

    @property
    def start_seconds(self) -> float:
        return parse_timecode(self.start)

    @property
    def end_seconds(self) -> float:
        return parse_timecode(self.end)


class ProductionPlan(BaseModel):
    """Full narration script, storyboard prompts and subtitles."""
    full_script: str
    image_prompts: List[str]
    subtitles: List[SubtitleSegment] = Field(default_factory=list)

    @field_validator("subtitles")
    @classmethod
    def sort_subtitles(cls, v):
        return sorted(v, key=lambda s: (s.start_seconds, s.index))


class AssetKind(str, Enum):
    """Kinds of generated assets."""
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"


class GeneratedAsset(BaseModel):
    """A generated artifact and where to find it.

    ``url`` is a ``data:`` URL for in-memory payloads, a local file path for
    clips written to the session work directory, or an http(s) URL.
    ``slot`` is the storyboard prompt index the asset belongs to (images and
    clips); audio has no slot.
    """
    kind: AssetKind
    url: str
    prompt: Optional[str] = None
    slot: Optional[int] = None


class PipelineState(str, Enum):
    """Production pipeline states."""
    IDLE = "idle"
    SCRIPTING = "scripting"
    IMAGING = "imaging"
    REVIEW_IMAGES = "review_images"
    VIDEOING = "videoing"
    COMPLETED = "completed"


class ProductionParameters(BaseModel):
    """User-confirmed production parameters."""
    is_short_form: bool = True
    visual_style: str = "cinematic"
    language: str = "Korean"
    image_count: int = 8
    narration_gain: float = Field(1.0, ge=0.0, le=2.0)
    background_gain: float = Field(0.3, ge=0.0, le=2.0)

    @property
    def aspect_ratio(self) -> str:
        return ProductionConfig.get_aspect_ratio(self.is_short_form)
