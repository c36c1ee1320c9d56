"""Fixed layout for level thumbnails.

The thumbnail is a 1280x720 canvas: the background is cover-fitted over the
whole canvas, the difficulty icon sits in the bottom-left corner and the
logo in the top-right corner, both inset by a 20 pixel margin.
"""

from __future__ import annotations

from io import BytesIO

from PIL import Image  # type: ignore[import]

from library.compositor import CENTER, Rect, draw_image, render_full_bleed

CANVAS_WIDTH = 1280
CANVAS_HEIGHT = 720
MARGIN = 20
ICON_SIZE = 120
LOGO_SIZE = 70


class EncodingError(RuntimeError):
    """Raised when the finished canvas cannot be serialised to PNG."""


def icon_rect(height: int = CANVAS_HEIGHT) -> Rect:
    return Rect(MARGIN, height - MARGIN - ICON_SIZE, ICON_SIZE, ICON_SIZE)


def logo_rect(width: int = CANVAS_WIDTH) -> Rect:
    return Rect(width - MARGIN - LOGO_SIZE, MARGIN, LOGO_SIZE, LOGO_SIZE)


def compose_level_thumbnail(
    background: Image.Image,
    icon: Image.Image,
    logo: Image.Image,
) -> Image.Image:
    """Draw the background, difficulty icon and logo onto a new canvas.

    Args:
        background: Any decoded image; it is cropped to the canvas ratio.
        icon: Difficulty badge, stretched to ``ICON_SIZE`` square.
        logo: Branding logo, stretched to ``LOGO_SIZE`` square.

    Returns:
        The RGBA canvas.
    """
    canvas = Image.new("RGBA", (CANVAS_WIDTH, CANVAS_HEIGHT), (0, 0, 0, 0))
    render_full_bleed(canvas, background, CENTER)
    draw_image(canvas, icon, icon_rect(canvas.height))
    draw_image(canvas, logo, logo_rect(canvas.width))
    return canvas


def encode_png(canvas: Image.Image) -> bytes:
    """Serialise a canvas to PNG bytes."""
    buffer = BytesIO()
    try:
        canvas.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodingError(f"Could not encode thumbnail as PNG: {e}") from e
    return buffer.getvalue()
