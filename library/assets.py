"""Local asset store for difficulty icons and the logo.

Assets are read from a directory laid out as::

    <ASSETS_DIR>/icon.png
    <ASSETS_DIR>/difficulty_icons/<level>.png

Loaded images are kept in process-wide caches for the lifetime of the
process. The caches are never invalidated or evicted and are not guarded by
a lock: two requests racing on the same key may both load the file, and the
last one wins, which is harmless because the assets are immutable.

Environment variables:
    ASSETS_DIR: Base directory for the assets (default ``<repo>/assets``).
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from PIL import Image, UnidentifiedImageError  # type: ignore[import]

ASSETS_DIR: str = os.getenv(
    "ASSETS_DIR",
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "assets"),
)
LOGO_FILENAME = "icon.png"
DIFFICULTY_ICONS_DIRNAME = "difficulty_icons"
DIFFICULTY_ICON_EXT = ".png"

logger = logging.getLogger(__name__)

_difficulty_icons: Dict[float, Image.Image] = {}
_logo: Optional[Image.Image] = None


def _open_asset(path: str) -> Image.Image:
    """Open an asset file, decode it fully and convert it to RGBA."""
    with Image.open(path) as img:
        img.load()
        return img.convert("RGBA")


def format_level(level: float) -> str:
    """Render a difficulty level the way it appears in a URL.

    Integral values drop their fractional part so that ``3.0`` maps to the
    file ``3.png``; other values keep Python's shortest repr (``2.5``).
    """
    if float(level).is_integer():
        return str(int(level))
    return repr(float(level))


def difficulty_icon_path(level: float) -> str:
    return os.path.join(
        ASSETS_DIR, DIFFICULTY_ICONS_DIRNAME, f"{format_level(level)}{DIFFICULTY_ICON_EXT}"
    )


def logo_path() -> str:
    return os.path.join(ASSETS_DIR, LOGO_FILENAME)


def get_difficulty_icon(level: float) -> Optional[Image.Image]:
    """Return the icon for a difficulty level, or ``None`` if there is none.

    Only successful loads are cached, so an icon added to the directory
    later is picked up by the next request that asks for it.
    """
    cached = _difficulty_icons.get(level)
    if cached is not None:
        return cached
    path = difficulty_icon_path(level)
    try:
        img = _open_asset(path)
    except (FileNotFoundError, UnidentifiedImageError, OSError) as e:
        logger.warning("No difficulty icon for level %s at %s: %s", format_level(level), path, e)
        return None
    logger.info("Cached difficulty icon for level %s", format_level(level))
    _difficulty_icons[level] = img
    return img


def get_logo() -> Image.Image:
    """Return the branding logo, loading it on first use.

    Raises:
        OSError: If the logo file is missing or cannot be decoded.
    """
    global _logo
    if _logo is None:
        _logo = _open_asset(logo_path())
        logger.info("Cached logo from %s", logo_path())
    return _logo
