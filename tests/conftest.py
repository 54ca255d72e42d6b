"""Shared fixtures."""
import base64
import io

import pytest
from PIL import Image

from ideator.core.config import settings
from ideator.models.concept import (
    AnalysisResult, PlatformSeo, RecommendedTopic, SeoContent, SeoData
)
from ideator.models.production import OutlineSection, ScriptOutline
from ideator.services.settings_store import SettingsStore


@pytest.fixture
def store(tmp_path, monkeypatch):
    """Settings store backed by a temp file, with no environment fallback keys."""
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "youtube_api_key", "")
    return SettingsStore(str(tmp_path / "store.json"))


def make_png(size=(64, 48), color=(200, 40, 40)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_seo(label: str = "seo") -> SeoData:
    platform = PlatformSeo(title=f"{label} title", description=f"{label} description", tags=[label])
    content = SeoContent(youtube=platform, tiktok=platform)
    return SeoData(short=content, long=content)


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def png_b64(png_bytes):
    return base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def analysis():
    return AnalysisResult(
        audience_reaction="Viewers love quick recipes",
        frequent_keywords=["recipe", "quick"],
        recommended_topics=[
            RecommendedTopic(keyword="5 minute pasta", reason="High demand"),
            RecommendedTopic(keyword="One pan dinner", reason="Low effort"),
        ],
        seo_data=make_seo("korean")
    )


@pytest.fixture
def outline():
    return ScriptOutline(
        title="Quick Pasta",
        sections=[
            OutlineSection(label="Hook", content="Dinner in five minutes"),
            OutlineSection(label="Body", content="Boil, toss, serve"),
        ]
    )


@pytest.fixture
def image_factory():
    return make_png


@pytest.fixture
def seo_factory():
    return make_seo
