"""
Coordinate transforms for the signature area

Three spaces are involved:
- canvas pixels: where the operator draws, at whatever scale the page was rendered
- page points: the PDF's native space for one page (scale 1.0)
- normalized: fractions of the page width/height, independent of render scale

Only the normalized form is kept between drawing and duplication, so every
recipient copy gets the area at the same relative position.
"""
import logging
import math
from ..config import settings
from ..exceptions import SignatureValidationError, ValidationReason
from ..models.signature import NormalizedArea, PageRect, PixelRect, Size, unit_square_problems

logger = logging.getLogger(__name__)


def _require_positive(size: Size, what: str) -> None:
    if not (math.isfinite(size.width) and math.isfinite(size.height) and size.width > 0 and size.height > 0):
        raise ValueError(f"{what} must have positive finite width and height, got {size.width}x{size.height}")


def _check_unit_bounds(x: float, y: float, width: float, height: float) -> None:
    """Reject a normalized rectangle that leaves the unit square"""
    problems = unit_square_problems(x, y, width, height)
    if problems:
        raise SignatureValidationError(
            ValidationReason.OUT_OF_BOUNDS,
            f"Signature area is outside the page: {', '.join(problems)} "
            f"(x={x:.4f}, y={y:.4f}, width={width:.4f}, height={height:.4f})",
        )


def check_area(area: NormalizedArea) -> None:
    """
    Validate an area that may not have gone through model validation

    Raises:
        SignatureValidationError: OUT_OF_BOUNDS
    """
    if not (isinstance(area.page, int) and area.page >= 0):
        raise SignatureValidationError(
            ValidationReason.OUT_OF_BOUNDS,
            f"Page index must not be negative, got {area.page}",
        )
    _check_unit_bounds(area.x, area.y, area.width, area.height)


def scale_factors(canvas_size: Size, page_size: Size):
    """Independent X/Y factors from canvas pixels to page points"""
    _require_positive(canvas_size, "Canvas")
    _require_positive(page_size, "Page")
    return page_size.width / canvas_size.width, page_size.height / canvas_size.height


def to_page_rect(pixel_rect: PixelRect, canvas_size: Size, page_size: Size, page_index: int = 0) -> PageRect:
    """
    Map a canvas rectangle into page points, without validation

    Args:
        pixel_rect: Rectangle in canvas pixels
        canvas_size: Size of the canvas the rectangle was drawn on
        page_size: Size of the same page at scale 1.0, in points
        page_index: Page the rectangle belongs to

    Returns:
        PageRect in points
    """
    scale_x, scale_y = scale_factors(canvas_size, page_size)

    x0 = pixel_rect.x * scale_x
    y0 = pixel_rect.y * scale_y
    x1 = (pixel_rect.x + pixel_rect.width) * scale_x
    y1 = (pixel_rect.y + pixel_rect.height) * scale_y

    return PageRect(page=page_index, x=x0, y=y0, width=x1 - x0, height=y1 - y0)


def normalize(
    pixel_rect: PixelRect,
    canvas_size: Size,
    page_size: Size,
    page_index: int = 0,
    min_width: float = None,
    min_height: float = None,
) -> NormalizedArea:
    """
    Convert a rectangle drawn on a rendered page into a NormalizedArea

    Args:
        pixel_rect: Finalized rectangle in canvas pixels
        canvas_size: Size of the rendered canvas the rectangle was drawn on
        page_size: Native page size in points
        page_index: 0-based page index
        min_width: Minimum width in canvas pixels (defaults to settings)
        min_height: Minimum height in canvas pixels (defaults to settings)

    Returns:
        NormalizedArea with all values in [0, 1]

    Raises:
        SignatureValidationError: TOO_SMALL or OUT_OF_BOUNDS
    """
    min_width = settings.min_signature_width if min_width is None else min_width
    min_height = settings.min_signature_height if min_height is None else min_height

    if not all(math.isfinite(v) for v in (pixel_rect.x, pixel_rect.y, pixel_rect.width, pixel_rect.height)):
        raise ValueError(f"Rectangle coordinates must be finite numbers, got {pixel_rect}")

    if not (pixel_rect.width >= min_width and pixel_rect.height >= min_height):
        raise SignatureValidationError(
            ValidationReason.TOO_SMALL,
            f"Signature area must be at least {min_width:g}x{min_height:g} pixels, "
            f"got {pixel_rect.width:g}x{pixel_rect.height:g}",
        )

    if page_index < 0:
        raise SignatureValidationError(
            ValidationReason.OUT_OF_BOUNDS,
            f"Page index must not be negative, got {page_index}",
        )

    page_rect = to_page_rect(pixel_rect, canvas_size, page_size, page_index)

    x = page_rect.x / page_size.width
    y = page_rect.y / page_size.height
    width = page_rect.width / page_size.width
    height = page_rect.height / page_size.height

    _check_unit_bounds(x, y, width, height)

    area = NormalizedArea(page=page_index, x=x, y=y, width=width, height=height)
    logger.debug(f"Normalized {pixel_rect} on canvas {canvas_size.width:g}x{canvas_size.height:g} -> {area}")
    return area


def denormalize(area: NormalizedArea, target_page_size: Size) -> PageRect:
    """
    Place a NormalizedArea on a concrete page

    The target size must be read from the page being annotated; the area is
    re-validated against it on every call.

    Args:
        area: Normalized signature area
        target_page_size: Size of the target page in points

    Returns:
        PageRect in points on area.page

    Raises:
        SignatureValidationError: OUT_OF_BOUNDS if the area does not fit
    """
    _require_positive(target_page_size, "Target page")
    check_area(area)

    return PageRect(
        page=area.page,
        x=area.x * target_page_size.width,
        y=area.y * target_page_size.height,
        width=area.width * target_page_size.width,
        height=area.height * target_page_size.height,
    )
