"""
Export packager.

Bundles a finished production into one zip archive built fully in memory, so
a failure anywhere yields an error and never a partial download.
"""
import asyncio
import io
import json
import re
import zipfile
from pathlib import Path
from typing import List, Optional

import aiohttp

from ..core.config import settings
from ..core.exceptions import PackagingError
from ..models.concept import AnalysisResult
from ..models.production import AssetKind, GeneratedAsset, ProductionPlan, SubtitleSegment
from ..utils.data_urls import decode_data_url, is_data_url
from ..utils.logging import CorrelatedLogger

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\s]+')


def to_srt(subtitles: List[SubtitleSegment]) -> str:
    """Render subtitle segments as SRT text, renumbered from 1 in order."""
    blocks = []
    for number, segment in enumerate(subtitles, start=1):
        blocks.append(f"{number}\n{segment.start} --> {segment.end}\n{segment.text.strip()}\n")
    return "\n".join(blocks)


def archive_name(title: Optional[str]) -> str:
    """Download file name for an export, derived from the outline title."""
    base = _UNSAFE_FILENAME_CHARS.sub("_", (title or "").strip()).strip("_")
    return f"{base or 'content'}_assets.zip"


class ExportPackager:
    """Service that packages scripts, subtitles, media and SEO data into a zip."""

    def __init__(self, http_timeout: Optional[int] = None):
        self.http_timeout = http_timeout or settings.http_timeout
        self.logger = CorrelatedLogger(__name__)

    async def build(
        self,
        plan: ProductionPlan,
        assets: List[GeneratedAsset],
        analysis: Optional[AnalysisResult] = None
    ) -> bytes:
        """
        Build the archive.

        Layout:
            script.txt, subtitles.srt / subtitles.json (when present),
            images/scene_NN.png, videos/clip_NN.mp4, narration.pcm,
            seo_data.json (when an analysis exists)

        Raises:
            PackagingError: if any asset cannot be read or the archive cannot
                be written.
        """
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                archive.writestr("script.txt", plan.full_script)

                if plan.subtitles:
                    archive.writestr("subtitles.srt", to_srt(plan.subtitles))
                    archive.writestr("subtitles.json", json.dumps(
                        [segment.model_dump() for segment in plan.subtitles],
                        ensure_ascii=False, indent=2
                    ))

                images = [a for a in assets if a.kind == AssetKind.IMAGE]
                for number, asset in enumerate(images, start=1):
                    archive.writestr(f"images/scene_{number:02d}.png", await self.read_asset(asset))

                clips = [a for a in assets if a.kind == AssetKind.VIDEO]
                for number, asset in enumerate(clips, start=1):
                    archive.writestr(f"videos/clip_{number:02d}.mp4", await self.read_asset(asset))

                audio = next((a for a in assets if a.kind == AssetKind.AUDIO), None)
                if audio is not None:
                    archive.writestr("narration.pcm", await self.read_asset(audio))

                if analysis is not None:
                    archive.writestr("seo_data.json", json.dumps(
                        analysis.model_dump(mode="json"), ensure_ascii=False, indent=2
                    ))
        except PackagingError:
            raise
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            self.logger.error(f"Archive creation failed: {str(e)}")
            raise PackagingError(f"Archive creation failed: {str(e)}")

        self.logger.info(
            f"Packaged {len(images)} images, {len(clips)} clips"
            f"{' and narration' if audio is not None else ''}"
        )
        return buffer.getvalue()

    async def read_asset(self, asset: GeneratedAsset) -> bytes:
        """Resolve an asset locator (data URL, http(s) URL or local path) to bytes."""
        url = asset.url
        if is_data_url(url):
            try:
                return decode_data_url(url)[1]
            except ValueError as e:
                raise PackagingError(f"Could not decode {asset.kind.value} asset: {str(e)}")
        if url.startswith(("http://", "https://")):
            return await self._fetch(url)

        try:
            return Path(url).read_bytes()
        except OSError as e:
            raise PackagingError(f"Could not read {asset.kind.value} asset: {str(e)}")

    async def _fetch(self, url: str) -> bytes:
        timeout = aiohttp.ClientTimeout(total=self.http_timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as response:
                    response.raise_for_status()
                    return await response.read()
        except asyncio.TimeoutError:
            raise PackagingError(f"Failed to fetch asset: timed out after {self.http_timeout}s")
        except aiohttp.ClientError as e:
            raise PackagingError(f"Failed to fetch asset: {str(e)}")
