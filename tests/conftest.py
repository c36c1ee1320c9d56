"""Shared fixtures for the level thumbnail tests.

Assets are generated with Pillow into a temporary directory and the asset
store is pointed at it, with empty caches, for the duration of each test.
"""

from pathlib import Path

import pytest
from PIL import Image  # type: ignore

from library import assets

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


def write_png(path: Path, size, color) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", size, color).save(path, format="PNG")
    return path


@pytest.fixture
def asset_dir(tmp_path, monkeypatch):
    """Create an asset directory with a logo and icons for levels 1 and 3.

    The level 3 icon is red and already 120x120; the level 1 icon is a
    small square that has to be scaled up. The logo is blue.
    """
    base = tmp_path / "assets"
    write_png(base / "icon.png", (70, 70), BLUE)
    write_png(base / "difficulty_icons" / "3.png", (120, 120), RED)
    write_png(base / "difficulty_icons" / "1.png", (16, 16), RED)
    monkeypatch.setattr(assets, "ASSETS_DIR", str(base))
    monkeypatch.setattr(assets, "_difficulty_icons", {})
    monkeypatch.setattr(assets, "_logo", None)
    return base


@pytest.fixture
def background_path(tmp_path):
    """A wide, solid green background image on disk."""
    return write_png(tmp_path / "background.png", (4000, 2000), GREEN)
