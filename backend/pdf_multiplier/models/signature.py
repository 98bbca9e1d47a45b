"""Signature area geometry models"""
import math
from pydantic import BaseModel, Field, model_validator
from typing import List

# Absorbs float noise on areas that touch the page edge exactly
EPSILON = 1e-9


def unit_square_problems(x: float, y: float, width: float, height: float) -> List[str]:
    """
    Ways in which a normalized rectangle leaves the unit square

    Every check is written so that NaN fails it.
    """
    if not all(math.isfinite(value) for value in (x, y, width, height)):
        return ["values must be finite numbers"]

    problems = []
    if not (x >= -EPSILON and y >= -EPSILON):
        problems.append("origin is negative")
    if not (x <= 1 + EPSILON and y <= 1 + EPSILON):
        problems.append("origin is past the page edge")
    if not (width > 0 and height > 0):
        problems.append("area is empty")
    if not (x + width <= 1 + EPSILON):
        problems.append("area overflows the right edge")
    if not (y + height <= 1 + EPSILON):
        problems.append("area overflows the bottom edge")
    return problems


class Point(BaseModel):
    """Pointer position on the rendered canvas, in pixels"""
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


class Size(BaseModel):
    """Width/height pair (canvas pixels or page points)"""
    width: float = Field(allow_inf_nan=False)
    height: float = Field(allow_inf_nan=False)


class PixelRect(BaseModel):
    """Rectangle drawn on the canvas, top-left origin, in canvas pixels"""
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    width: float = Field(allow_inf_nan=False)
    height: float = Field(allow_inf_nan=False)

    @classmethod
    def from_drag(cls, start: Point, end: Point) -> "PixelRect":
        """Build a rectangle from two drag corners in any direction"""
        return cls(
            x=min(start.x, end.x),
            y=min(start.y, end.y),
            width=abs(end.x - start.x),
            height=abs(end.y - start.y),
        )


class PageRect(BaseModel):
    """Rectangle in PDF points on a specific page, top-left origin"""
    page: int = Field(ge=0)
    x: float
    y: float
    width: float
    height: float


class NormalizedArea(BaseModel):
    """
    Signature area as fractions of the page width and height

    x, y, width and height all lie in [0, 1], with x + width <= 1 and
    y + height <= 1. Anything else is rejected, never clamped.
    """
    page: int = Field(default=0, ge=0)
    x: float
    y: float
    width: float
    height: float

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _inside_unit_square(self) -> "NormalizedArea":
        problems = unit_square_problems(self.x, self.y, self.width, self.height)
        if problems:
            raise ValueError(f"Signature area is outside the page: {', '.join(problems)}")
        return self
