"""Data models for the Content Ideator service."""
from .concept import Concept, RecommendedTopic, PlatformSeo, SeoContent, SeoData, AnalysisResult
from .video import DiscoveredVideo, Comment
from .production import (
    OutlineSection, ScriptOutline, SubtitleSegment, ProductionPlan,
    AssetKind, GeneratedAsset, PipelineState, ProductionParameters
)
from .favorites import FavoriteProject
from .requests import (
    CredentialsUpdateRequest, WorkspaceCreateRequest, ConceptRequest, VideoSelectRequest,
    LanguageRequest, OutlineRequest, ProductionRequest
)
from .responses import (
    ResponseMetadata, ErrorDetails, ErrorInfo, SuccessResponse, ErrorResponse,
    DependencyStatus, HealthData, AssetSummary, ProductionStatus, WorkspaceState
)

__all__ = [
    "Concept", "RecommendedTopic", "PlatformSeo", "SeoContent", "SeoData", "AnalysisResult",
    "DiscoveredVideo", "Comment",
    "OutlineSection", "ScriptOutline", "SubtitleSegment", "ProductionPlan",
    "AssetKind", "GeneratedAsset", "PipelineState", "ProductionParameters",
    "FavoriteProject",
    "CredentialsUpdateRequest", "WorkspaceCreateRequest", "ConceptRequest", "VideoSelectRequest",
    "LanguageRequest", "OutlineRequest", "ProductionRequest",
    "ResponseMetadata", "ErrorDetails", "ErrorInfo", "SuccessResponse", "ErrorResponse",
    "DependencyStatus", "HealthData", "AssetSummary", "ProductionStatus", "WorkspaceState"
]
