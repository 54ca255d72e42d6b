"""Request models for the Content Ideator service."""
from typing import Optional
from pydantic import BaseModel, Field

from .production import ProductionParameters
from .video import DiscoveredVideo


class CredentialsUpdateRequest(BaseModel):
    """Request model for updating stored credentials."""
    genai_api_key: Optional[str] = None
    youtube_api_key: Optional[str] = None


class WorkspaceCreateRequest(BaseModel):
    """Request model for opening a new workspace."""
    language: Optional[str] = None


class ConceptRequest(BaseModel):
    """Request model for concept generation."""
    topic: str
    language: Optional[str] = None


class VideoSelectRequest(BaseModel):
    """Request model for analyzing a discovered video."""
    video: DiscoveredVideo


class LanguageRequest(BaseModel):
    """Request model for switching the workspace language."""
    language: str


class OutlineRequest(BaseModel):
    """Request model for outline generation from a recommended keyword."""
    keyword: str


class ProductionRequest(BaseModel):
    """Request model for starting a production run."""
    parameters: ProductionParameters = Field(default_factory=ProductionParameters)
