"""Unit tests for data models."""
import pytest
from pydantic import ValidationError as PydanticValidationError

from ideator.models.concept import Concept
from ideator.models.favorites import FavoriteProject
from ideator.models.production import ProductionParameters, ProductionPlan, SubtitleSegment
from ideator.models.video import DiscoveredVideo


class TestDiscoveredVideo:
    """Test efficiency ratio computation."""

    def test_efficiency_ratio(self):
        video = DiscoveredVideo(id="v1", title="Clip", view_count=5000, subscriber_count=1000)

        assert video.efficiency_ratio == pytest.approx(500.0)

    def test_zero_subscribers_gives_zero_ratio(self):
        video = DiscoveredVideo(id="v1", title="Clip", view_count=5000, subscriber_count=0)

        assert video.efficiency_ratio == 0.0

    def test_ratio_is_serialized(self):
        video = DiscoveredVideo(id="v1", title="Clip", view_count=10, subscriber_count=100)

        assert video.model_dump()["efficiency_ratio"] == pytest.approx(10.0)

    def test_roundtrip_ignores_computed_field(self):
        video = DiscoveredVideo(id="v1", title="Clip", view_count=10, subscriber_count=100)
        restored = DiscoveredVideo.model_validate(video.model_dump())

        assert restored == video


class TestConcept:
    """Test concept constraints."""

    def _concept(self, virality):
        return Concept(
            id="c1", title="Title", description="Desc", style="vlog",
            target_audience="students", estimated_virality=virality
        )

    def test_virality_is_clamped(self):
        assert self._concept(140).estimated_virality == 100.0
        assert self._concept(-3).estimated_virality == 0.0
        assert self._concept(72).estimated_virality == 72.0

    def test_concept_is_immutable(self):
        concept = self._concept(50)

        with pytest.raises(PydanticValidationError):
            concept.title = "Changed"


class TestSubtitleSegment:
    """Test subtitle timing normalization."""

    def test_timecodes_are_normalized(self):
        segment = SubtitleSegment(index=1, start="00:00:01.5", end="00:00:03", text="Hi")

        assert segment.start == "00:00:01,500"
        assert segment.end == "00:00:03,000"
        assert segment.start_seconds == pytest.approx(1.5)
        assert segment.end_seconds == pytest.approx(3.0)

    def test_invalid_timecode_rejected(self):
        with pytest.raises(PydanticValidationError):
            SubtitleSegment(index=1, start="soon", end="later", text="Hi")


class TestProductionPlan:
    def test_subtitles_sorted_by_start(self):
        plan = ProductionPlan(
            full_script="One. Two. Three.",
            image_prompts=["p"],
            subtitles=[
                SubtitleSegment(index=3, start="00:00:04,000", end="00:00:06,000", text="Three."),
                SubtitleSegment(index=1, start="00:00:00,000", end="00:00:02,000", text="One."),
                SubtitleSegment(index=2, start="00:00:02,000", end="00:00:04,000", text="Two."),
            ]
        )

        assert [s.index for s in plan.subtitles] == [1, 2, 3]


class TestProductionParameters:
    def test_aspect_ratio_follows_format(self):
        assert ProductionParameters(is_short_form=True).aspect_ratio == "9:16"
        assert ProductionParameters(is_short_form=False, image_count=40).aspect_ratio == "16:9"

    def test_gain_bounds(self):
        with pytest.raises(PydanticValidationError):
            ProductionParameters(narration_gain=3.0)


class TestFavoriteProject:
    def test_title_prefers_video(self):
        video = DiscoveredVideo(id="v1", title="Video title")
        favorite = FavoriteProject(id="v1", video=video, saved_at=1)

        assert favorite.title == "Video title"

    def test_title_falls_back_to_id(self):
        assert FavoriteProject(id="x", saved_at=1).title == "x"
