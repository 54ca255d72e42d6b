"""Response models for the Content Ideator service."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from .concept import AnalysisResult, Concept
from .favorites import FavoriteProject
from .production import ScriptOutline
from .video import DiscoveredVideo

class ResponseMetadata(BaseModel):
    """Standard response metadata."""
    request_id: str
    api_version: str = "1.0.0"
    timestamp: Optional[str] = None
    processing_time_ms: Optional[int] = None

class ErrorDetails(BaseModel):
    """Detailed error information."""
    reason: Optional[str] = None
    service: Optional[str] = None
    setting: Optional[str] = None

    model_config = {"extra": "allow"}

class ErrorInfo(BaseModel):
    """Error information structure."""
    code: str
    message: str
    details: Optional[ErrorDetails] = None

class SuccessResponse(BaseModel):
    """Standard success response."""
    success: bool = True
    data: Any
    metadata: ResponseMetadata

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: ErrorInfo
    metadata: ResponseMetadata

class DependencyStatus(BaseModel):
    """Service dependency status."""
    generative_backend: str
    video_platform: str
    settings_store: str

class HealthData(BaseModel):
    """Complete health check response."""
    status: str
    timestamp: str
    version: str
    dependencies: DependencyStatus
    active_workspaces: int
    active_productions: int

class AssetSummary(BaseModel):
    """Generated asset as exposed over the API."""
    position: int
    kind: str
    slot: Optional[int] = None
    prompt: Optional[str] = None
    href: str

class ProductionStatus(BaseModel):
    """Snapshot of a production session."""
    id: str
    state: str
    progress: str
    busy: bool
    title: str
    parameters: Dict[str, Any]
    full_script: Optional[str] = None
    image_prompts: List[str] = []
    subtitle_count: int = 0
    assets: List[AssetSummary] = []
    image_failures: Dict[int, str] = {}
    errors: List[str] = []
    regenerating_index: Optional[int] = None

class WorkspaceState(BaseModel):
    """Snapshot of an ideation workspace."""
    id: str
    language: str
    topic: str = ""
    concepts: List[Concept] = []
    search_results: List[DiscoveredVideo] = []
    selected_concept: Optional[Concept] = None
    selected_video: Optional[DiscoveredVideo] = None
    analysis: Optional[AnalysisResult] = None
    outline: Optional[ScriptOutline] = None
    is_favorite: bool = False
    favorites: List[FavoriteProject] = []
