"""Generative content service using the OpenAI API."""
import asyncio
import base64
import uuid
from typing import Any, Callable, List, Optional, Type, TypeVar

import openai
from openai import OpenAI
from pydantic import BaseModel

from ..config.localization import get_voice, normalize_language
from ..config.schemas import (
    AnalysisResponse, ConceptBatchResponse, OutlineResponse,
    ProductionPlanResponse, SeoStrategyResponse, TopicsResponse
)
from ..config.templates import PromptTemplateEngine, get_template_engine
from ..core.config import ProductionConfig, settings
from ..core.exceptions import (
    AuthError, ConfigError, EmptyInputError, GenerationError,
    UpstreamError, ValidationError
)
from ..models.concept import (
    AnalysisResult, Concept, PlatformSeo, RecommendedTopic, SeoContent, SeoData
)
from ..models.production import (
    OutlineSection, ProductionPlan, ScriptOutline, SubtitleSegment
)
from ..models.video import Comment, DiscoveredVideo
from ..utils.imaging import cover_fit, load_image, parse_size, to_png_bytes
from ..utils.logging import CorrelatedLogger
from .settings_store import SettingsStore, StoreEvent

ResponseT = TypeVar("ResponseT", bound=BaseModel)

CONCEPT_COUNT = 4


class GenerativeContentClient:
    """
    Service wrapping the generative backend.

    Every structured call sends a rendered instruction together with a strict
    output schema and parses the structured result; nothing is cached.
    """

    SERVICE = "Generative backend"
    VIDEO_DONE_STATES = ("completed", "failed")

    def __init__(
        self,
        store: SettingsStore,
        template_engine: Optional[PromptTemplateEngine] = None
    ):
        self.store = store
        self.logger = CorrelatedLogger(__name__)
        self.template_engine = template_engine or get_template_engine()
        self._client: Optional[OpenAI] = None
        self._unsubscribe = store.subscribe(StoreEvent.CREDENTIALS_CHANGED, self._reset_client)

    def _reset_client(self) -> None:
        self._client = None
        self.logger.info("Credentials changed, generative client will be rebuilt")

    def _get_client(self) -> OpenAI:
        """Get the SDK client, failing before any network call if no key is set."""
        api_key = self.store.get_credential(SettingsStore.GENAI_KEY)
        if not api_key:
            raise ConfigError(SettingsStore.GENAI_KEY)

        if self._client is None:
            try:
                self._client = OpenAI(api_key=api_key)
            except openai.OpenAIError as e:
                raise ConfigError(SettingsStore.GENAI_KEY, str(e))
        return self._client

    def close(self) -> None:
        self._unsubscribe()

    async def _call(self, operation: str, func: Callable[..., Any], **kwargs: Any) -> Any:
        """Run a blocking SDK call off the event loop and map SDK errors."""
        try:
            return await asyncio.to_thread(func, **kwargs)
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise AuthError(self.SERVICE, str(e))
        except openai.OpenAIError as e:
            self.logger.error(f"{operation} failed: {str(e)}")
            raise UpstreamError(self.SERVICE, f"{operation}: {str(e)}")

    async def _structured(
        self,
        prompt_type: str,
        response_model: Type[ResponseT],
        model: Optional[str] = None,
        **template_vars: Any
    ) -> ResponseT:
        """Send a structured-output request and return the parsed schema."""
        client = self._get_client()
        prompt = self.template_engine.render_prompt(prompt_type, **template_vars)

        completion = await self._call(
            prompt_type,
            client.chat.completions.parse,
            model=model or settings.text_model,
            messages=prompt.as_messages(),
            response_format=response_model
        )

        if not completion.choices:
            raise UpstreamError(self.SERVICE, f"{prompt_type}: empty response")

        message = completion.choices[0].message
        if message.refusal:
            raise UpstreamError(self.SERVICE, f"{prompt_type}: request refused ({message.refusal})")
        if message.parsed is None:
            raise UpstreamError(self.SERVICE, f"{prompt_type}: malformed structured response")

        return message.parsed

    # Ideation

    async def generate_concepts(self, topic: str, language: str) -> List[Concept]:
        """Generate four concepts for a free-text topic."""
        language_name = normalize_language(language).value
        self.logger.info(f"Generating concepts for topic '{topic}' ({language_name})")

        response = await self._structured(
            "concepts", ConceptBatchResponse, topic=topic, language=language_name
        )

        if len(response.concepts) < CONCEPT_COUNT:
            raise UpstreamError(
                self.SERVICE,
                f"concepts: expected {CONCEPT_COUNT}, received {len(response.concepts)}"
            )

        concepts = []
        seen_ids = set()
        for item in response.concepts[:CONCEPT_COUNT]:
            concept_id = item.id.strip()
            if not concept_id or concept_id in seen_ids:
                concept_id = uuid.uuid4().hex[:8]
            seen_ids.add(concept_id)

            concepts.append(Concept(
                id=concept_id,
                title=item.title,
                description=item.description,
                translated_title=item.translated_title,
                translated_description=item.translated_description,
                style=item.style,
                target_audience=item.target_audience,
                estimated_virality=item.estimated_virality
            ))
        return concepts

    async def analyze_concept(self, concept: Concept, language: str) -> AnalysisResult:
        """Analyze a concept brief."""
        if not (concept.title.strip() or concept.description.strip()):
            raise EmptyInputError(concept.id, "Concept has no title or description")

        response = await self._structured(
            "concept_analysis",
            AnalysisResponse,
            title=concept.title,
            description=concept.description,
            style=concept.style,
            target_audience=concept.target_audience,
            language=normalize_language(language).value
        )
        return self._to_analysis(response)

    async def analyze_video(
        self,
        video: DiscoveredVideo,
        comments: List[Comment],
        language: str
    ) -> AnalysisResult:
        """Analyze a discovered video from its top comments."""
        texts = [comment.text.strip() for comment in comments if comment.text.strip()]
        if not texts:
            raise EmptyInputError(video.title or video.id, "Video has no comments to analyze")

        self.logger.info(f"Analyzing {len(texts)} comments for video {video.id}")
        response = await self._structured(
            "video_analysis",
            AnalysisResponse,
            title=video.title,
            comments=texts,
            language=normalize_language(language).value
        )
        return self._to_analysis(response)

    async def refresh_seo_strategy(self, subject: str, summary: str, language: str) -> SeoData:
        """Regenerate only the SEO bundles, e.g. after a language switch."""
        response = await self._structured(
            "seo_strategy",
            SeoStrategyResponse,
            subject=subject,
            summary=summary or "",
            language=normalize_language(language).value
        )
        return self._to_seo(response)

    async def regenerate_topics(
        self,
        subject: str,
        analysis: AnalysisResult,
        language: str
    ) -> List[RecommendedTopic]:
        """Regenerate the recommended topics of an analysis."""
        response = await self._structured(
            "topics",
            TopicsResponse,
            subject=subject,
            summary=analysis.audience_reaction,
            previous=[topic.keyword for topic in analysis.recommended_topics],
            language=normalize_language(language).value
        )
        return [RecommendedTopic(keyword=t.keyword, reason=t.reason) for t in response.recommended_topics]

    async def generate_outline(self, keyword: str, context: str, language: str) -> ScriptOutline:
        """Generate a script outline for a keyword."""
        if not keyword.strip():
            raise ValidationError("Keyword is required")

        response = await self._structured(
            "outline",
            OutlineResponse,
            keyword=keyword.strip(),
            context=context or "",
            language=normalize_language(language).value
        )
        return ScriptOutline(
            title=response.title,
            sections=[OutlineSection(label=s.label, content=s.content) for s in response.sections]
        )

    # Production

    async def generate_production_plan(
        self,
        outline: ScriptOutline,
        is_short_form: bool,
        visual_style: str,
        image_count: int,
        language: str
    ) -> ProductionPlan:
        """Expand an outline into a narration script, storyboard prompts and subtitles."""
        low, high = ProductionConfig.get_image_count_range(is_short_form)
        if not low <= image_count <= high:
            raise ValidationError(
                f"image_count must be between {low} and {high} for this format",
                {"image_count": image_count, "min": low, "max": high}
            )

        response = await self._structured(
            "production_plan",
            ProductionPlanResponse,
            model=settings.planning_model,
            title=outline.title,
            sections=outline.sections,
            is_short_form=is_short_form,
            visual_style=visual_style,
            image_count=image_count,
            language=normalize_language(language).value
        )

        prompts = [p.strip() for p in response.image_prompts if p.strip()]
        if len(prompts) < image_count:
            raise UpstreamError(
                self.SERVICE,
                f"production_plan: expected {image_count} image prompts, received {len(prompts)}"
            )
        if not response.full_script.strip():
            raise UpstreamError(self.SERVICE, "production_plan: empty script")

        try:
            subtitles = [
                SubtitleSegment(index=s.index, start=s.start, end=s.end, text=s.text)
                for s in response.subtitles
            ]
        except ValueError as e:
            raise UpstreamError(self.SERVICE, f"production_plan: invalid subtitle timing ({str(e)})")

        return ProductionPlan(
            full_script=response.full_script,
            image_prompts=prompts[:image_count],
            subtitles=subtitles
        )

    async def generate_image(self, prompt: str, aspect_ratio: str) -> bytes:
        """Generate one storyboard image (PNG bytes) with text-free composition."""
        client = self._get_client()
        rendered = self.template_engine.render_prompt("image", prompt=prompt, aspect_ratio=aspect_ratio)

        response = await self._call(
            "image",
            client.images.generate,
            model=settings.image_model,
            prompt=rendered.user,
            size=ProductionConfig.get_image_size(aspect_ratio),
            quality=settings.image_quality,
            n=1
        )

        if not response.data or not response.data[0].b64_json:
            raise GenerationError("image", "Image content missing in response")
        return base64.b64decode(response.data[0].b64_json)

    async def generate_speech(self, text: str, language: str) -> bytes:
        """Synthesize narration as raw 16-bit PCM (24 kHz, mono)."""
        if not text.strip():
            raise EmptyInputError("narration", "Script is empty")

        client = self._get_client()
        rendered = self.template_engine.render_prompt(
            "speech", language=normalize_language(language).value
        )

        response = await self._call(
            "speech",
            client.audio.speech.create,
            model=settings.speech_model,
            voice=get_voice(language),
            input=text,
            instructions=rendered.user,
            response_format="pcm"
        )

        audio = response.content
        if not audio:
            raise GenerationError("speech", "No audio payload returned")
        return audio

    async def generate_video_clip(
        self,
        prompt: str,
        start_image: bytes,
        aspect_ratio: str,
        cancel_event: Optional[asyncio.Event] = None
    ) -> bytes:
        """
        Generate a short clip that animates ``start_image``.

        Clip generation is a long-running operation: the handle is polled every
        ``settings.video_poll_interval`` seconds until it reports a terminal
        state. Setting ``cancel_event`` stops polling with ``CancelledError``.
        """
        client = self._get_client()
        if cancel_event is not None and cancel_event.is_set():
            raise asyncio.CancelledError()

        size = ProductionConfig.get_video_size(aspect_ratio)
        rendered = self.template_engine.render_prompt("video_clip", prompt=prompt)

        try:
            reference = to_png_bytes(cover_fit(load_image(start_image), parse_size(size)))
        except OSError as e:
            raise GenerationError("video_clip", f"Unreadable start image: {str(e)}")

        video = await self._call(
            "video_clip",
            client.videos.create,
            model=settings.video_model,
            prompt=rendered.user,
            size=size,
            seconds=settings.video_clip_seconds,
            input_reference=("start_frame.png", reference, "image/png")
        )
        self.logger.info(f"Video operation {video.id} started")

        while video.status not in self.VIDEO_DONE_STATES:
            if await self._wait_or_cancel(cancel_event, settings.video_poll_interval):
                self.logger.info(f"Video operation {video.id} cancelled")
                raise asyncio.CancelledError()
            video = await self._call("video_clip", client.videos.retrieve, video_id=video.id)

        if video.status == "failed":
            reason = getattr(video.error, "message", None) or "Operation failed"
            raise GenerationError("video_clip", reason)

        content = await self._call(
            "video_clip", client.videos.download_content, video_id=video.id
        )
        data = content.content if content is not None else None
        if not data:
            raise GenerationError("video_clip", "Video result missing after completion")
        return data

    @staticmethod
    async def _wait_or_cancel(cancel_event: Optional[asyncio.Event], timeout: float) -> bool:
        """Sleep for ``timeout`` seconds; returns True if cancelled meanwhile."""
        if cancel_event is None:
            await asyncio.sleep(timeout)
            return False
        if cancel_event.is_set():
            return True
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False

    # Conversion

    def _to_analysis(self, response: AnalysisResponse) -> AnalysisResult:
        return AnalysisResult(
            audience_reaction=response.audience_reaction,
            frequent_keywords=list(response.frequent_keywords),
            recommended_topics=[
                RecommendedTopic(keyword=t.keyword, reason=t.reason)
                for t in response.recommended_topics
            ],
            seo_data=self._to_seo(response.seo_data)
        )

    @staticmethod
    def _to_seo(response: SeoStrategyResponse) -> SeoData:
        def content(item) -> SeoContent:
            return SeoContent(
                youtube=PlatformSeo(**item.youtube.model_dump()),
                tiktok=PlatformSeo(**item.tiktok.model_dump())
            )
        return SeoData(short=content(response.short), long=content(response.long))
