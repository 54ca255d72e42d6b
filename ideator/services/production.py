"""
Production pipeline controller.

Drives one production run from a script outline to finished assets:
plan -> narration -> storyboard images -> (optional) video clips, with local
assembly and export on demand. Stages run strictly in sequence inside a single
background task per session.
"""
import asyncio
import shutil
import tempfile
import time
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.config import ProductionConfig, settings
from ..core.exceptions import ConflictError, IdeatorBaseException, NotFoundError, ValidationError
from ..models.concept import AnalysisResult
from ..models.production import (
    AssetKind, GeneratedAsset, PipelineState, ProductionParameters,
    ProductionPlan, ScriptOutline
)
from ..models.responses import AssetSummary, ProductionStatus
from ..utils.data_urls import decode_data_url, is_data_url, to_data_url
from ..utils.logging import CorrelatedLogger, ProductionMetricsLogger
from ..utils.response_helpers import ResponseHelper
from .export_packager import ExportPackager
from .generative_client import GenerativeContentClient
from .media_assembler import LocalMediaAssembler


def sample_clip_indices(image_count: int, clip_count: int) -> List[int]:
    """
    Pick which images get a video clip.

    Uses ``stride = max(1, image_count // clip_count)`` and takes indices
    ``0, stride, 2*stride, ...`` below ``image_count``, at most ``clip_count``.
    """
    if image_count <= 0 or clip_count <= 0:
        return []
    stride = max(1, image_count // clip_count)
    return [i * stride for i in range(clip_count) if i * stride < image_count]


def get_clip_count(is_short_form: bool) -> int:
    return settings.short_form_clip_count if is_short_form else settings.long_form_clip_count


class ProductionSession:
    """
    One production run.

    Owns the accumulated assets and pipeline state exclusively. At most one
    background task runs at a time; ``dispose`` cancels it together with any
    in-flight clip polling.
    """

    CLIP_MEDIA_TYPE = "video/mp4"

    def __init__(
        self,
        session_id: str,
        client: GenerativeContentClient,
        assembler: LocalMediaAssembler,
        packager: ExportPackager,
        outline: ScriptOutline,
        parameters: ProductionParameters,
        analysis: Optional[AnalysisResult] = None,
        work_dir: Optional[Path] = None
    ):
        self.id = session_id
        self.client = client
        self.assembler = assembler
        self.packager = packager
        self.outline = outline
        self.parameters = parameters
        self.analysis = analysis
        self.work_dir = Path(work_dir) if work_dir else Path(tempfile.gettempdir()) / "ideator" / session_id
        self.logger = CorrelatedLogger(__name__, session_id)
        self.metrics = ProductionMetricsLogger()

        self.state = PipelineState.IDLE
        self.progress = ""
        self.plan: Optional[ProductionPlan] = None
        self.assets: List[GeneratedAsset] = []
        self.image_failures: Dict[int, str] = {}
        self.errors: List[str] = []
        self.regenerating_index: Optional[int] = None
        self.assembled_path: Optional[Path] = None

        self._task: Optional[asyncio.Task] = None
        self._cancel_event = asyncio.Event()
        self._assembling = False

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def aspect_ratio(self) -> str:
        return self.parameters.aspect_ratio

    def _launch(self, operation: str, coro) -> None:
        if self.busy:
            coro.close()
            raise ConflictError(operation, "Another production step is still running")
        self._task = asyncio.create_task(coro)
        self._task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.logger.error(f"Production task crashed: {error!r}")
            self.errors.append(f"Unexpected failure: {str(error)}")

    def _record_error(self, stage: str, error: IdeatorBaseException) -> None:
        self.logger.warning(f"{stage} failed: {error.message}")
        self.errors.append(f"{stage}: {error.message}")

    # Pipeline

    async def start(self) -> None:
        """Start plan, narration and image generation in the background."""
        if self.state != PipelineState.IDLE:
            raise ConflictError("start", f"Production already started (state: {self.state.value})")
        self._launch("start", self._run_production())

    async def _run_production(self) -> None:
        params = self.parameters
        self.state = PipelineState.SCRIPTING
        self.progress = "Writing script and subtitles"
        self.errors.clear()

        started_at = time.perf_counter()
        try:
            plan = await self.client.generate_production_plan(
                self.outline, params.is_short_form, params.visual_style,
                params.image_count, params.language
            )
        except IdeatorBaseException as e:
            self.metrics.log_stage_metrics(self.id, "script", False, ResponseHelper.elapsed_ms(started_at))
            self._record_error("script", e)
            self.state = PipelineState.IDLE
            self.progress = ""
            return
        self.plan = plan
        self.metrics.log_stage_metrics(self.id, "script", True, ResponseHelper.elapsed_ms(started_at))

        self.progress = "Synthesizing narration"
        started_at = time.perf_counter()
        try:
            audio = await self.client.generate_speech(plan.full_script, params.language)
            self.assets.append(GeneratedAsset(
                kind=AssetKind.AUDIO, url=to_data_url("audio/pcm", audio)
            ))
            self.metrics.log_stage_metrics(self.id, "narration", True, ResponseHelper.elapsed_ms(started_at))
        except IdeatorBaseException as e:
            # Production continues without narration
            self.metrics.log_stage_metrics(self.id, "narration", False, ResponseHelper.elapsed_ms(started_at))
            self._record_error("narration", e)

        self.state = PipelineState.IMAGING
        total = len(plan.image_prompts)
        started_at = time.perf_counter()
        for slot, prompt in enumerate(plan.image_prompts):
            self.progress = f"Generating image {slot + 1}/{total}"
            try:
                data = await self.client.generate_image(prompt, self.aspect_ratio)
            except IdeatorBaseException as e:
                self.image_failures[slot] = e.message
                self.logger.warning(f"Image {slot + 1}/{total} failed: {e.message}")
                continue
            self.assets.append(GeneratedAsset(
                kind=AssetKind.IMAGE, url=to_data_url("image/png", data), prompt=prompt, slot=slot
            ))

        self.metrics.log_stage_metrics(
            self.id, "images", bool(self.image_assets()), ResponseHelper.elapsed_ms(started_at),
            item_count=total, failed_count=len(self.image_failures)
        )
        self.state = PipelineState.REVIEW_IMAGES
        self.progress = f"{len(self.image_assets())}/{total} images ready for review"
        self.logger.info(self.progress)

    async def start_clips(self) -> None:
        """Animate a stride-sampled subset of the storyboard in the background."""
        if self.state != PipelineState.REVIEW_IMAGES:
            raise ConflictError("start_clips", f"Images must be reviewed first (state: {self.state.value})")
        if self.regenerating_index is not None:
            raise ConflictError("start_clips", f"Image {self.regenerating_index} is being regenerated")
        if not self.image_assets():
            raise ValidationError("No storyboard images available for clip generation")
        self._launch("start_clips", self._run_clips())

    async def _run_clips(self) -> None:
        self.state = PipelineState.VIDEOING
        self.assets = [a for a in self.assets if a.kind != AssetKind.VIDEO]

        images = self.image_assets()
        indices = sample_clip_indices(len(images), get_clip_count(self.parameters.is_short_form))
        self.work_dir.mkdir(parents=True, exist_ok=True)
        started_at = time.perf_counter()

        for position, index in enumerate(indices, start=1):
            source = images[index]
            self.progress = f"Generating clip {position}/{len(indices)}"
            try:
                data = await self.client.generate_video_clip(
                    source.prompt or "", self._asset_bytes(source), self.aspect_ratio,
                    cancel_event=self._cancel_event
                )
            except IdeatorBaseException as e:
                self.metrics.log_stage_metrics(
                    self.id, "clips", False, ResponseHelper.elapsed_ms(started_at),
                    item_count=len(indices), failed_count=1
                )
                self._record_error(f"clip {position}", e)
                self.state = PipelineState.REVIEW_IMAGES
                self.progress = ""
                return

            clip_path = self.work_dir / f"clip_{position:02d}.mp4"
            await asyncio.to_thread(clip_path.write_bytes, data)
            self.assets.append(GeneratedAsset(
                kind=AssetKind.VIDEO, url=str(clip_path), prompt=source.prompt, slot=source.slot
            ))

        self.metrics.log_stage_metrics(
            self.id, "clips", True, ResponseHelper.elapsed_ms(started_at), item_count=len(indices)
        )
        self.state = PipelineState.COMPLETED
        self.progress = f"{len(indices)} clips ready"
        self.logger.info(self.progress)

    async def regenerate_image(self, slot: int) -> GeneratedAsset:
        """
        Regenerate the image for one storyboard slot.

        Other slots are untouched. A slot whose first attempt failed gets its
        image inserted in prompt order.
        """
        if self.plan is None or not 0 <= slot < len(self.plan.image_prompts):
            raise NotFoundError("Image slot", str(slot))
        if self.regenerating_index is not None:
            raise ConflictError("regenerate_image", f"Image {self.regenerating_index} is already being regenerated")
        if self.busy:
            raise ConflictError("regenerate_image", f"Pipeline is busy (state: {self.state.value})")

        prompt = self.plan.image_prompts[slot]
        self.regenerating_index = slot
        started_at = time.perf_counter()
        try:
            data = await self.client.generate_image(prompt, self.aspect_ratio)
        except IdeatorBaseException as e:
            self.metrics.log_generation_metrics(
                self.id, "regenerate_image", False, ResponseHelper.elapsed_ms(started_at),
                slot=slot, error_code=e.error_code
            )
            raise
        finally:
            self.regenerating_index = None
        self.metrics.log_generation_metrics(
            self.id, "regenerate_image", True, ResponseHelper.elapsed_ms(started_at), slot=slot
        )

        asset = GeneratedAsset(kind=AssetKind.IMAGE, url=to_data_url("image/png", data), prompt=prompt, slot=slot)
        self._place_image(asset)
        self.image_failures.pop(slot, None)
        self.logger.info(f"Image slot {slot} regenerated")
        return asset

    def _place_image(self, asset: GeneratedAsset) -> None:
        for i, existing in enumerate(self.assets):
            if existing.kind == AssetKind.IMAGE and existing.slot == asset.slot:
                self.assets[i] = asset
                return

        insert_at = len(self.assets)
        for i, existing in enumerate(self.assets):
            if existing.kind == AssetKind.IMAGE and existing.slot > asset.slot:
                insert_at = i
                break
            if existing.kind == AssetKind.VIDEO:
                insert_at = i
                break
        self.assets.insert(insert_at, asset)

    # Output

    async def assemble(self, background_track: Optional[bytes] = None) -> Path:
        """Render the storyboard and narration into a local video file."""
        if self.busy or self._assembling:
            raise ConflictError("assemble", "Pipeline is busy")

        images = [self._asset_bytes(asset) for asset in self.image_assets()]
        audio = self.audio_asset()
        narration = self._asset_bytes(audio) if audio is not None else None

        self._assembling = True
        try:
            self.assembled_path = await self.assembler.assemble(
                images,
                narration,
                self.work_dir / f"assembled{LocalMediaAssembler.EXTENSION}",
                aspect_ratio=self.aspect_ratio,
                narration_gain=self.parameters.narration_gain,
                background_track=background_track,
                background_gain=self.parameters.background_gain
            )
        finally:
            self._assembling = False
        return self.assembled_path

    async def export(self) -> bytes:
        """Package script, subtitles, media and SEO data into a zip archive."""
        if self.plan is None or not self.assets:
            raise ValidationError("Nothing to export yet")
        return await self.packager.build(self.plan, self.assets, self.analysis)

    def asset_content(self, position: int) -> Tuple[bytes, str]:
        """Return the payload and media type of the asset at ``position``."""
        if not 0 <= position < len(self.assets):
            raise NotFoundError("Asset", str(position))
        asset = self.assets[position]
        if is_data_url(asset.url):
            mime_type, data = decode_data_url(asset.url)
            return data, mime_type
        try:
            return Path(asset.url).read_bytes(), self.CLIP_MEDIA_TYPE
        except OSError:
            raise NotFoundError("Asset file", str(position))

    def image_assets(self) -> List[GeneratedAsset]:
        return [a for a in self.assets if a.kind == AssetKind.IMAGE]

    def audio_asset(self) -> Optional[GeneratedAsset]:
        return next((a for a in self.assets if a.kind == AssetKind.AUDIO), None)

    def _asset_bytes(self, asset: GeneratedAsset) -> bytes:
        if is_data_url(asset.url):
            return decode_data_url(asset.url)[1]
        return Path(asset.url).read_bytes()

    def status(self) -> ProductionStatus:
        return ProductionStatus(
            id=self.id,
            state=self.state.value,
            progress=self.progress,
            busy=self.busy,
            title=self.outline.title,
            parameters={**self.parameters.model_dump(), "aspect_ratio": self.aspect_ratio},
            full_script=self.plan.full_script if self.plan else None,
            image_prompts=list(self.plan.image_prompts) if self.plan else [],
            subtitle_count=len(self.plan.subtitles) if self.plan else 0,
            assets=[
                AssetSummary(
                    position=position,
                    kind=asset.kind.value,
                    slot=asset.slot,
                    prompt=asset.prompt,
                    href=f"/productions/{self.id}/assets/{position}"
                )
                for position, asset in enumerate(self.assets)
            ],
            image_failures=dict(self.image_failures),
            errors=list(self.errors),
            regenerating_index=self.regenerating_index
        )

    async def dispose(self) -> None:
        """Cancel in-flight work and remove the session's files."""
        self._cancel_event.set()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        shutil.rmtree(self.work_dir, ignore_errors=True)
        self.logger.info("Production session disposed")


class ProductionManager:
    """Registry of production sessions."""

    def __init__(
        self,
        client: GenerativeContentClient,
        assembler: LocalMediaAssembler,
        packager: ExportPackager,
        work_root: Optional[str] = None
    ):
        self.client = client
        self.assembler = assembler
        self.packager = packager
        self.work_root = Path(work_root or settings.production_work_dir or Path(tempfile.gettempdir()) / "ideator")
        self.logger = CorrelatedLogger(__name__)
        self._sessions: Dict[str, ProductionSession] = {}

    def create(
        self,
        outline: ScriptOutline,
        parameters: ProductionParameters,
        analysis: Optional[AnalysisResult] = None
    ) -> ProductionSession:
        """Create an idle session after validating the production parameters."""
        low, high = ProductionConfig.get_image_count_range(parameters.is_short_form)
        if not low <= parameters.image_count <= high:
            raise ValidationError(
                f"image_count must be between {low} and {high} for this format",
                {"image_count": parameters.image_count, "min": low, "max": high}
            )

        session_id = uuid.uuid4().hex[:12]
        session = ProductionSession(
            session_id, self.client, self.assembler, self.packager,
            outline, parameters, analysis, self.work_root / session_id
        )
        self._sessions[session_id] = session
        self.logger.info(f"Production session {session_id} created for '{outline.title}'")
        return session

    def get(self, session_id: str) -> ProductionSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError("Production", session_id)
        return session

    async def remove(self, session_id: str) -> None:
        session = self.get(session_id)
        del self._sessions[session_id]
        await session.dispose()

    async def dispose_all(self) -> None:
        for session_id in list(self._sessions):
            await self.remove(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
