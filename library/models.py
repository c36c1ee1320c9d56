"""Pydantic models for the level thumbnail endpoint.

The query string is validated against :class:`LevelQuery` inside the route
handler rather than through FastAPI's parameter injection, so a failed
validation raises :class:`pydantic.ValidationError` into the handler's own
error path.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field, field_validator


class LevelQuery(BaseModel):
    """Query parameters accepted by ``GET /api/level``.

    Attributes:
        thumbnail: URL, data URL or local path of the background image.
        difficulty: Numeric level used to pick the difficulty icon. Infinite
            values are accepted and simply match no icon; NaN is rejected.
    """

    thumbnail: str = Field(min_length=1)
    difficulty: float

    @field_validator("difficulty")
    @classmethod
    def reject_nan(cls, value: float) -> float:
        if math.isnan(value):
            raise ValueError("difficulty must be a number")
        return value
