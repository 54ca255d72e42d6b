"""
Local media assembler.

Builds a playable video from storyboard images and narration audio without a
server round-trip: narration PCM is decoded, every image gets an equal slice
of the narration, frames are cover-fitted and watermarked, an optional
looping background track is mixed in, and the result is encoded as
VP9 + Opus WebM.
"""
import asyncio
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from moviepy import AudioArrayClip, AudioFileClip, VideoClip
from PIL import Image, ImageDraw, ImageFont

from ..core.config import settings
from ..core.exceptions import AssemblyError
from ..utils.imaging import cover_fit, load_image
from ..utils.logging import CorrelatedLogger


def decode_pcm(data: bytes) -> np.ndarray:
    """Decode 16-bit little-endian mono PCM into float32 samples in [-1, 1)."""
    usable = len(data) - (len(data) % 2)
    samples = np.frombuffer(data[:usable], dtype="<i2")
    return samples.astype(np.float32) / 32768.0


def display_windows(total_duration: float, image_count: int) -> List[Tuple[float, float]]:
    """Uniform display windows: each image is shown for ``total_duration / image_count``."""
    if image_count <= 0:
        return []
    slice_length = total_duration / image_count
    windows = [(i * slice_length, (i + 1) * slice_length) for i in range(image_count)]
    windows[-1] = (windows[-1][0], total_duration)
    return windows


def image_index_at(t: float, total_duration: float, image_count: int) -> int:
    """Index of the image whose display window contains media time ``t``."""
    if image_count <= 0 or total_duration <= 0:
        return 0
    index = int(t // (total_duration / image_count))
    return min(max(index, 0), image_count - 1)


def canvas_size(aspect_ratio: str, base_width: int) -> Tuple[int, int]:
    """Frame size for an aspect ratio; the long edge equals ``base_width``."""
    try:
        ratio_w, ratio_h = (float(part) for part in aspect_ratio.split(":"))
    except ValueError:
        raise AssemblyError(f"Invalid aspect ratio: {aspect_ratio}")
    if ratio_w <= 0 or ratio_h <= 0:
        raise AssemblyError(f"Invalid aspect ratio: {aspect_ratio}")

    if ratio_w >= ratio_h:
        width, height = base_width, round(base_width * ratio_h / ratio_w)
    else:
        width, height = round(base_width * ratio_w / ratio_h), base_width

    # Encoders want even dimensions
    return width - width % 2, height - height % 2


def mix_tracks(
    narration: np.ndarray,
    narration_gain: float,
    background: Optional[np.ndarray] = None,
    background_gain: float = 0.0
) -> np.ndarray:
    """Sum narration and a looped background track into one clipped mono signal."""
    mixed = narration.astype(np.float32) * narration_gain
    if background is not None and background.size and background_gain > 0:
        looped = np.resize(background.astype(np.float32), narration.shape)
        mixed = mixed + looped * background_gain
    return np.clip(mixed, -1.0, 1.0).astype(np.float32)


class LocalMediaAssembler:
    """Service that renders storyboard images and narration into a video file."""

    VIDEO_CODEC = "libvpx-vp9"
    AUDIO_CODEC = "libopus"
    EXTENSION = ".webm"
    AUDIO_TEMP_EXTENSION = ".ogg"

    def __init__(
        self,
        sample_rate: Optional[int] = None,
        fps: Optional[int] = None,
        base_width: Optional[int] = None,
        watermark_text: Optional[str] = None
    ):
        self.sample_rate = sample_rate or settings.sample_rate
        self.fps = fps or settings.assembly_fps
        self.base_width = base_width or settings.canvas_base_width
        self.watermark_text = watermark_text if watermark_text is not None else settings.watermark_text
        self.logger = CorrelatedLogger(__name__)

    async def assemble(
        self,
        images: List[bytes],
        narration_pcm: Optional[bytes],
        output_path: Path,
        aspect_ratio: str = "16:9",
        narration_gain: float = 1.0,
        background_track: Optional[bytes] = None,
        background_gain: float = 0.3
    ) -> Path:
        """
        Assemble and encode the video.

        Raises:
            AssemblyError: on missing inputs (before any rendering) or when
                decoding or encoding fails; no partial file is left behind.
        """
        if not images:
            raise AssemblyError("No images to assemble")
        if not narration_pcm:
            raise AssemblyError("No narration audio to assemble")

        return await asyncio.to_thread(
            self._assemble_sync,
            images, narration_pcm, Path(output_path), aspect_ratio,
            narration_gain, background_track, background_gain
        )

    def _assemble_sync(
        self,
        images: List[bytes],
        narration_pcm: bytes,
        output_path: Path,
        aspect_ratio: str,
        narration_gain: float,
        background_track: Optional[bytes],
        background_gain: float
    ) -> Path:
        narration = decode_pcm(narration_pcm)
        total_duration = narration.size / self.sample_rate
        if total_duration <= 0:
            raise AssemblyError("Narration audio is empty")

        size = canvas_size(aspect_ratio, self.base_width)
        try:
            frames = [self.render_frame(load_image(data), size) for data in images]
        except OSError as e:
            raise AssemblyError(f"Unreadable storyboard image: {str(e)}")

        background = self._decode_background(background_track) if background_track else None
        mixed = mix_tracks(narration, narration_gain, background, background_gain)

        self.logger.info(
            f"Assembling {len(frames)} images over {total_duration:.2f}s "
            f"({total_duration / len(frames):.2f}s each) at {size[0]}x{size[1]}"
        )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        partial_path = output_path.with_name(f"{output_path.stem}.partial{self.EXTENSION}")
        # Opus only accepts 8/12/16/24/48 kHz, so the temp track keeps the narration rate
        audio_path = partial_path.with_suffix(self.AUDIO_TEMP_EXTENSION)

        def frame_at(t: float) -> np.ndarray:
            return frames[image_index_at(t, total_duration, len(frames))]

        video = None
        try:
            audio = AudioArrayClip(np.column_stack([mixed, mixed]), fps=self.sample_rate)
            video = VideoClip(frame_function=frame_at, duration=total_duration).with_audio(audio)
            video.write_videofile(
                str(partial_path),
                fps=self.fps,
                codec=self.VIDEO_CODEC,
                audio_codec=self.AUDIO_CODEC,
                audio_fps=self.sample_rate,
                temp_audiofile=str(audio_path),
                logger=None
            )
            os.replace(partial_path, output_path)
        except Exception as e:
            for leftover in (partial_path, audio_path):
                if leftover.exists():
                    leftover.unlink()
            self.logger.error(f"Encoding failed: {str(e)}")
            raise AssemblyError(f"Encoding failed: {str(e)}")
        finally:
            if video is not None:
                video.close()

        self.logger.info(f"Assembled video written to {output_path}")
        return output_path

    def render_frame(self, image: Image.Image, size: Tuple[int, int]) -> np.ndarray:
        """Cover-fit an image to the canvas and overlay the watermark."""
        frame = cover_fit(image, size)
        if self.watermark_text:
            self._draw_watermark(frame)
        return np.asarray(frame, dtype=np.uint8)

    def _draw_watermark(self, frame: Image.Image) -> None:
        draw = ImageDraw.Draw(frame)
        font = ImageFont.load_default(size=max(14, frame.width // 40))
        left, top, right, bottom = draw.textbbox((0, 0), self.watermark_text, font=font)
        margin = max(8, frame.width // 60)
        x = frame.width - (right - left) - margin
        y = frame.height - (bottom - top) - margin
        draw.text((x + 2, y + 2), self.watermark_text, font=font, fill=(0, 0, 0))
        draw.text((x, y), self.watermark_text, font=font, fill=(255, 255, 255))

    def _decode_background(self, data: bytes) -> np.ndarray:
        """Decode an encoded background track to mono samples at the narration rate."""
        fd, path = tempfile.mkstemp(suffix=".bgm")
        clip = None
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            clip = AudioFileClip(path)
            samples = clip.to_soundarray(fps=self.sample_rate)
        except Exception as e:
            raise AssemblyError(f"Unsupported background track: {str(e)}")
        finally:
            if clip is not None:
                clip.close()
            os.remove(path)

        samples = np.asarray(samples, dtype=np.float32)
        return samples.mean(axis=1) if samples.ndim == 2 else samples
