"""Helpers for in-memory asset locators (``data:`` URLs)."""
import base64
import binascii
import re
from typing import Tuple

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*)(?P<b64>;base64)?,(?P<payload>.*)$", re.DOTALL)


def to_data_url(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def is_data_url(url: str) -> bool:
    return url.startswith("data:")


def decode_data_url(url: str) -> Tuple[str, bytes]:
    """
    Split a data URL into its media type and payload.

    Raises:
        ValueError: if the URL is not a well-formed data URL.
    """
    match = _DATA_URL_PATTERN.match(url)
    if not match:
        raise ValueError("Malformed data URL")

    mime_type = match.group("mime") or "text/plain"
    payload = match.group("payload")
    if not match.group("b64"):
        return mime_type, payload.encode("utf-8")
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Malformed data URL: {str(e)}")
