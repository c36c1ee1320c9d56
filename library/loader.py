"""Background image loading.

A background can be given as an ``http(s)`` URL, a ``data:`` URL or a path
on the local filesystem. Whatever the source, the result is a fully decoded
Pillow image; every failure is reported as :class:`ImageLoadError`.

Environment variables:
    FETCH_TIMEOUT: Seconds to wait for a remote image (default 20).
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from io import BytesIO
from typing import Optional
from urllib.parse import unquote_to_bytes

import httpx
from PIL import Image, UnidentifiedImageError  # type: ignore[import]

FETCH_TIMEOUT: float = float(os.getenv("FETCH_TIMEOUT", "20"))

logger = logging.getLogger(__name__)


class ImageLoadError(RuntimeError):
    """Raised when an image source cannot be fetched or decoded."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Could not load image from {_describe(source)}: {reason}")
        self.source = source


def _describe(source: str) -> str:
    # data URLs can be megabytes long
    if source.startswith("data:"):
        return source[:32] + "..."
    return source


def _decode(source: str, data: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageLoadError(source, f"not a decodable image ({e})") from e
    return img


def _decode_data_url(source: str) -> bytes:
    header, sep, payload = source.partition(",")
    if not sep:
        raise ImageLoadError(source, "malformed data URL")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageLoadError(source, "invalid base64 payload") from e
    return unquote_to_bytes(payload)


async def _fetch(source: str, client: Optional[httpx.AsyncClient]) -> bytes:
    try:
        if client is None:
            async with httpx.AsyncClient(follow_redirects=True, timeout=FETCH_TIMEOUT) as own:
                r = await own.get(source)
                r.raise_for_status()
                return r.content
        r = await client.get(source, follow_redirects=True, timeout=FETCH_TIMEOUT)
        r.raise_for_status()
        return r.content
    except httpx.HTTPError as e:
        raise ImageLoadError(source, str(e) or type(e).__name__) from e


def _read_file(source: str) -> bytes:
    try:
        with open(source, "rb") as f:
            return f.read()
    except OSError as e:
        raise ImageLoadError(source, e.strerror or str(e)) from e


async def load_image(source: str, client: Optional[httpx.AsyncClient] = None) -> Image.Image:
    """Load and decode an image from a URL, data URL or file path.

    Args:
        source: ``http://`` or ``https://`` URL, ``data:`` URL, or a path.
        client: Optional shared HTTP client. When omitted a short-lived
            client is created for the request.

    Returns:
        The decoded image.

    Raises:
        ImageLoadError: If the source cannot be read or is not an image.
    """
    lowered = source.lower()
    if lowered.startswith(("http://", "https://")):
        data = await _fetch(source, client)
    elif lowered.startswith("data:"):
        data = _decode_data_url(source)
    else:
        data = _read_file(source)
    img = _decode(source, data)
    logger.debug("Loaded %s image %dx%d from %s", img.format, img.width, img.height, _describe(source))
    return img
