from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from conftest import make_pdf
from pdf_multiplier.exceptions import DocumentLoadError
from pdf_multiplier.models import NormalizedArea, PixelRect
from pdf_multiplier.services import PageRenderer, normalize


def _decode(preview) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(preview.image_base64))).convert("RGB")


def test_preview_reports_canvas_and_page_sizes(source_pdf):
    preview = PageRenderer().render_page(source_pdf, page_number=0, scale=1.5)

    assert preview.page_count == 1
    assert (preview.page_size.width, preview.page_size.height) == (612, 792)
    assert (preview.canvas_size.width, preview.canvas_size.height) == (918, 1188)
    assert _decode(preview).size == (918, 1188)


def test_rectangle_drawn_on_preview_normalizes_to_same_area_at_any_scale(source_pdf):
    renderer = PageRenderer()
    areas = []
    for scale in (0.75, 1.5, 3.0):
        preview = renderer.render_page(source_pdf, scale=scale)
        rect = PixelRect(x=100 * scale, y=200 * scale, width=120 * scale, height=40 * scale)
        areas.append(normalize(rect, preview.canvas_size, preview.page_size, min_width=0, min_height=0))

    for area in areas[1:]:
        assert area.x == pytest.approx(areas[0].x, abs=1e-3)
        assert area.height == pytest.approx(areas[0].height, abs=1e-3)


def test_committed_area_is_highlighted(source_pdf):
    area = NormalizedArea(page=0, x=0.5, y=0.5, width=0.2, height=0.1)

    plain = _decode(PageRenderer().render_page(source_pdf, scale=1.0))
    highlighted = _decode(PageRenderer().render_page(source_pdf, scale=1.0, area=area))

    inside = (int(0.6 * 612), int(0.55 * 792))
    assert plain.getpixel(inside) == (255, 255, 255)
    assert highlighted.getpixel(inside) != (255, 255, 255)
    assert highlighted.getpixel((10, 10)) == (255, 255, 255)


def test_default_scale_is_used(source_pdf):
    preview = PageRenderer(default_scale=2.0).render_page(source_pdf)
    assert preview.scale == 2.0
    assert preview.canvas_size.width == 1224


def test_invalid_page_and_document():
    with pytest.raises(ValueError):
        PageRenderer().render_page(make_pdf(pages=2), page_number=2)
    with pytest.raises(DocumentLoadError):
        PageRenderer().render_page(b"garbage")
