"""Structured output schemas for generation requests."""

from .generation_schemas import (
    ConceptItem,
    ConceptBatchResponse,
    TopicItem,
    PlatformSeoItem,
    SeoContentItem,
    SeoStrategyResponse,
    AnalysisResponse,
    TopicsResponse,
    OutlineSectionItem,
    OutlineResponse,
    SubtitleItem,
    ProductionPlanResponse
)

__all__ = [
    'ConceptItem',
    'ConceptBatchResponse',
    'TopicItem',
    'PlatformSeoItem',
    'SeoContentItem',
    'SeoStrategyResponse',
    'AnalysisResponse',
    'TopicsResponse',
    'OutlineSectionItem',
    'OutlineResponse',
    'SubtitleItem',
    'ProductionPlanResponse'
]
