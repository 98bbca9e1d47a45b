from __future__ import annotations

import pytest

from pdf_multiplier.exceptions import InvalidCaptureState, SignatureValidationError, ValidationReason
from pdf_multiplier.models import PixelRect, Point, Size
from pdf_multiplier.services.signature_capture import CaptureState, SignatureCapture


def _capture() -> SignatureCapture:
    return SignatureCapture(canvas_size=Size(width=918, height=1188), page_size=Size(width=612, height=792))


def test_drag_and_release_commits_area():
    capture = _capture()

    capture.begin_drag(Point(x=220, y=240))
    assert capture.state == CaptureState.DRAGGING
    assert capture.drag_to(Point(x=220, y=240)).width == 0  # zero-area intermediate state is fine

    area = capture.release(Point(x=100, y=200))  # dragged up and to the left

    assert capture.state == CaptureState.COMMITTED
    assert capture.area == area
    assert area.x == pytest.approx(100 / 918)
    assert area.width == pytest.approx(120 / 918)
    assert area.height == pytest.approx(40 / 1188)


def test_drag_rectangle_is_direction_independent():
    rect = PixelRect.from_drag(Point(x=300, y=50), Point(x=100, y=150))
    assert (rect.x, rect.y, rect.width, rect.height) == (100, 50, 200, 100)


def test_small_release_goes_back_to_idle():
    capture = _capture()
    capture.begin_drag(Point(x=10, y=10))

    with pytest.raises(SignatureValidationError) as exc_info:
        capture.release(Point(x=30, y=20))

    assert exc_info.value.reason == ValidationReason.TOO_SMALL
    assert capture.state == CaptureState.IDLE
    assert capture.area is None


def test_new_drag_discards_committed_area():
    capture = _capture()
    capture.begin_drag(Point(x=0, y=0))
    capture.release(Point(x=200, y=100))

    capture.begin_drag(Point(x=500, y=500))

    assert capture.area is None
    assert capture.state == CaptureState.DRAGGING

    with pytest.raises(SignatureValidationError):
        capture.release(Point(x=510, y=505))
    assert capture.area is None


def test_rejected_rect_keeps_previous_area():
    capture = _capture()
    first = capture.commit_rect(PixelRect(x=100, y=100, width=200, height=60))

    with pytest.raises(SignatureValidationError) as exc_info:
        capture.commit_rect(PixelRect(x=900, y=100, width=200, height=60))

    assert exc_info.value.reason == ValidationReason.OUT_OF_BOUNDS
    assert capture.area == first
    assert capture.state == CaptureState.COMMITTED


def test_operations_in_wrong_state_raise():
    capture = _capture()

    with pytest.raises(InvalidCaptureState):
        capture.release(Point(x=1, y=1))
    with pytest.raises(InvalidCaptureState):
        capture.drag_to(Point(x=1, y=1))

    capture.begin_drag(Point(x=0, y=0))
    with pytest.raises(InvalidCaptureState):
        capture.begin_drag(Point(x=0, y=0))
    with pytest.raises(InvalidCaptureState):
        capture.commit_rect(PixelRect(x=0, y=0, width=100, height=100))


def test_reset_for_document_drops_area_and_uses_new_geometry():
    capture = _capture()
    capture.commit_rect(PixelRect(x=0, y=0, width=100, height=50))

    capture.reset_for_document(Size(width=595, height=842), Size(width=595, height=842), page_index=2)

    assert capture.state == CaptureState.IDLE
    assert capture.area is None
    area = capture.commit_rect(PixelRect(x=0, y=0, width=595, height=842))
    assert area.page == 2
    assert area.width == pytest.approx(1.0)
