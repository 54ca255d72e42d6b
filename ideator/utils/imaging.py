"""Image helpers shared by clip generation and local assembly."""
import io
from typing import Tuple

from PIL import Image


def load_image(data: bytes) -> Image.Image:
    """Decode image bytes into an RGB image."""
    with Image.open(io.BytesIO(data)) as image:
        return image.convert("RGB")


def crop_box(source_size: Tuple[int, int], target_size: Tuple[int, int]) -> Tuple[int, int, int, int]:
    """
    Centered crop box that gives the source the target's aspect ratio.

    Compares the two aspect ratios and crops whichever axis overflows.
    """
    src_w, src_h = source_size
    dst_w, dst_h = target_size
    src_ratio = src_w / src_h
    dst_ratio = dst_w / dst_h

    if src_ratio > dst_ratio:
        # Too wide: crop horizontally
        new_w = max(1, round(src_h * dst_ratio))
        left = (src_w - new_w) // 2
        return (left, 0, left + new_w, src_h)

    # Too tall (or equal): crop vertically
    new_h = max(1, round(src_w / dst_ratio))
    top = (src_h - new_h) // 2
    return (0, top, src_w, top + new_h)


def cover_fit(image: Image.Image, target_size: Tuple[int, int]) -> Image.Image:
    """Scale and crop an image to fill ``target_size`` without distortion."""
    cropped = image.crop(crop_box(image.size, target_size))
    return cropped.resize(target_size, Image.LANCZOS)


def to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def parse_size(size: str) -> Tuple[int, int]:
    """Parse ``"1280x720"`` into ``(1280, 720)``."""
    width, height = size.lower().split("x")
    return int(width), int(height)
