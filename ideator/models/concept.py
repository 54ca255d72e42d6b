"""Ideation data models: concepts, analysis results and SEO bundles."""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class Concept(BaseModel):
    """An AI-proposed video idea."""
    id: str
    title: str
    description: str
    translated_title: Optional[str] = None
    translated_description: Optional[str] = None
    style: str
    target_audience: str
    estimated_virality: float = Field(..., description="Estimated virality score (0-100)")

    model_config = {"frozen": True}

    @field_validator("estimated_virality")
    @classmethod
    def clamp_virality(cls, v):
        return min(100.0, max(0.0, float(v)))


class RecommendedTopic(BaseModel):
    """A recommended follow-up topic."""
    keyword: str
    reason: str


class PlatformSeo(BaseModel):
    """Title, description and tags for one platform."""
    title: str
    description: str
    tags: List[str] = Field(default_factory=list)


class SeoContent(BaseModel):
    """SEO bundle for one video format."""
    youtube: PlatformSeo
    tiktok: PlatformSeo


class SeoData(BaseModel):
    """SEO bundles for short-form and long-form formats."""
    short: SeoContent
    long: SeoContent


class AnalysisResult(BaseModel):
    """Derived insight for a concept or a discovered video."""
    audience_reaction: str
    frequent_keywords: List[str] = Field(default_factory=list)
    recommended_topics: List[RecommendedTopic] = Field(default_factory=list)
    seo_data: Optional[SeoData] = None
