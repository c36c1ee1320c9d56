"""Proportional image compositing.

This module maps an arbitrarily sized source image onto a fixed destination
rectangle without distortion, the way CSS ``background-size: cover`` does.
The geometry lives in :func:`compute_crop`, which is pure and can be tested
without touching any pixels. The ``render_*`` helpers draw the computed crop
onto a Pillow canvas in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Tuple

from PIL import Image  # type: ignore[import]

# Tolerance used to decide whether the width pass already adjusted the ratio.
RATIO_EPSILON = 1e-14


@dataclass(frozen=True)
class Anchor:
    """Normalised point in the source that survives the crop.

    ``(0.5, 0.5)`` keeps the centre, ``(0, 0)`` the top-left corner and
    ``(1, 1)`` the bottom-right corner.
    """

    offset_x: float = 0.5
    offset_y: float = 0.5

    def clamped(self) -> "Anchor":
        """Return a copy with both components forced into ``[0.0, 1.0]``."""
        return Anchor(_clamp_unit(self.offset_x), _clamp_unit(self.offset_y))


CENTER = Anchor()


class Rect(NamedTuple):
    """Destination rectangle in canvas pixels."""

    x: int
    y: int
    width: int
    height: int


class SourceCrop(NamedTuple):
    """Region of the source image, in source pixels, that fills the destination."""

    cx: float
    cy: float
    cw: float
    ch: float

    @property
    def box(self) -> Tuple[float, float, float, float]:
        """The crop as a Pillow ``(left, upper, right, lower)`` box."""
        return (self.cx, self.cy, self.cx + self.cw, self.cy + self.ch)


def _clamp_unit(value: float) -> float:
    if value < 0:
        return 0.0
    if value > 1:
        return 1.0
    return float(value)


def compute_crop(
    source_width: float,
    source_height: float,
    dest_width: float,
    dest_height: float,
    anchor: Anchor = CENTER,
) -> SourceCrop:
    """Compute the largest crop of the source that covers the destination.

    The source is first scaled so that it fits entirely inside the
    destination ("contain"), then scaled up along the axis that under-fills
    it so the destination is fully covered ("cover"). Whatever overflows the
    destination at that scale is cropped away, positioned by ``anchor``.

    All four dimensions must be positive. Zero or negative sizes produce
    meaningless geometry; callers are expected to validate them first.

    Args:
        source_width: Width of the source image in pixels.
        source_height: Height of the source image in pixels.
        dest_width: Width of the destination rectangle.
        dest_height: Height of the destination rectangle.
        anchor: Where to keep the crop when the source overflows. Components
            outside ``[0, 1]`` are clamped silently.

    Returns:
        The crop in source pixel space. Its aspect ratio equals
        ``dest_width / dest_height`` up to floating point error.
    """
    anchor = anchor.clamped()
    iw, ih = float(source_width), float(source_height)
    w, h = float(dest_width), float(dest_height)

    r = min(w / iw, h / ih)
    nw = iw * r
    nh = ih * r

    # decide which gap to fill
    ar = 1.0
    if nw < w:
        ar = w / nw
    if abs(ar - 1) < RATIO_EPSILON and nh < h:
        ar = h / nh
    nw *= ar
    nh *= ar

    cw = iw / (nw / w)
    ch = ih / (nh / h)
    cx = (iw - cw) * anchor.offset_x
    cy = (ih - ch) * anchor.offset_y

    return SourceCrop(
        cx=max(cx, 0.0),
        cy=max(cy, 0.0),
        cw=min(cw, iw),
        ch=min(ch, ih),
    )


def _as_rgba(img: Image.Image) -> Image.Image:
    return img if img.mode == "RGBA" else img.convert("RGBA")


def render_to_region(
    canvas: Image.Image,
    image: Image.Image,
    rect: Rect,
    anchor: Anchor = CENTER,
) -> SourceCrop:
    """Cover-fit ``image`` into ``rect`` on ``canvas``.

    The canvas must be an RGBA image; it is modified in place.

    Returns:
        The crop that was drawn, useful for logging and tests.
    """
    rect = Rect(*rect)
    crop = compute_crop(image.width, image.height, rect.width, rect.height, anchor)
    left, upper, right, lower = crop.box
    # Pillow rejects boxes that overshoot the source by float rounding
    box = (left, upper, min(right, image.width), min(lower, image.height))
    region = _as_rgba(image).resize((rect.width, rect.height), Image.LANCZOS, box=box)
    canvas.alpha_composite(region, dest=(rect.x, rect.y))
    return crop


def render_full_bleed(
    canvas: Image.Image,
    image: Image.Image,
    anchor: Anchor = CENTER,
) -> SourceCrop:
    """Cover-fit ``image`` over the whole canvas, cropping as needed."""
    return render_to_region(canvas, image, Rect(0, 0, canvas.width, canvas.height), anchor)


def draw_image(canvas: Image.Image, image: Image.Image, rect: Rect) -> None:
    """Stretch ``image`` into ``rect`` and blend it over the canvas.

    Unlike :func:`render_to_region` no cropping happens, so the image is
    distorted if its aspect ratio differs from the rectangle's. Used for
    square overlays such as badges and logos.
    """
    rect = Rect(*rect)
    overlay = _as_rgba(image)
    if overlay.size != (rect.width, rect.height):
        overlay = overlay.resize((rect.width, rect.height), Image.LANCZOS)
    canvas.alpha_composite(overlay, dest=(rect.x, rect.y))
