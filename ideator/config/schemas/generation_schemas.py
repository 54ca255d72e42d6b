"""
Pydantic schemas for structured generation responses.

These are the strict output schemas sent with each structured request.
Every field is required (nullable where optional) so the schemas are
accepted by strict structured-output mode; conversion to the domain models
happens in the generative client.
"""
from typing import List, Optional
from pydantic import BaseModel


class ConceptItem(BaseModel):
    id: str
    title: str
    description: str
    translated_title: Optional[str]
    translated_description: Optional[str]
    style: str
    target_audience: str
    estimated_virality: int


class ConceptBatchResponse(BaseModel):
    """Response for concept generation."""
    concepts: List[ConceptItem]


class TopicItem(BaseModel):
    keyword: str
    reason: str


class PlatformSeoItem(BaseModel):
    title: str
    description: str
    tags: List[str]


class SeoContentItem(BaseModel):
    youtube: PlatformSeoItem
    tiktok: PlatformSeoItem


class SeoStrategyResponse(BaseModel):
    """Response for SEO strategy generation."""
    short: SeoContentItem
    long: SeoContentItem


class AnalysisResponse(BaseModel):
    """Response for concept and video analysis."""
    audience_reaction: str
    frequent_keywords: List[str]
    recommended_topics: List[TopicItem]
    seo_data: SeoStrategyResponse


class TopicsResponse(BaseModel):
    """Response for recommended-topic regeneration."""
    recommended_topics: List[TopicItem]


class OutlineSectionItem(BaseModel):
    label: str
    content: str


class OutlineResponse(BaseModel):
    """Response for outline generation."""
    title: str
    sections: List[OutlineSectionItem]


class SubtitleItem(BaseModel):
    index: int
    start: str
    end: str
    text: str


class ProductionPlanResponse(BaseModel):
    """Response for production plan generation."""
    full_script: str
    image_prompts: List[str]
    subtitles: List[SubtitleItem]
