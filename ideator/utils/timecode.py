"""Subtitle timecode helpers (SRT style ``HH:MM:SS,mmm``)."""
import re

_TIMECODE_PATTERN = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2})(?:[,.](\d{1,3}))?$")


def parse_timecode(value: str) -> float:
    """Convert ``HH:MM:SS,mmm`` (or ``MM:SS.mmm``) to seconds."""
    match = _TIMECODE_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid timecode: {value!r}")

    hours, minutes, seconds, millis = match.groups()
    total = int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds)
    if millis:
        total += int(millis.ljust(3, "0")) / 1000.0
    return float(total)


def format_timecode(seconds: float) -> str:
    """Convert seconds to ``HH:MM:SS,mmm``."""
    total_ms = max(0, int(round(seconds * 1000)))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def normalize_timecode(value: str) -> str:
    """Re-emit any accepted timecode in canonical SRT form."""
    return format_timecode(parse_timecode(value))
