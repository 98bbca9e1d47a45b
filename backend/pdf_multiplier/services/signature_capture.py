"""Interactive signature area capture"""
from enum import Enum
from typing import Optional
import logging
from ..exceptions import InvalidCaptureState, SignatureValidationError
from ..models.signature import NormalizedArea, PixelRect, Point, Size
from .coordinate_transform import normalize

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    CANDIDATE = "candidate"
    COMMITTED = "committed"


class SignatureCapture:
    """
    Tracks one drag session against one rendered page

    idle -> dragging -> candidate -> committed. A failed candidate goes back
    to idle. Starting a new drag discards the committed area, so a document
    never has more than one.
    """

    def __init__(self, canvas_size: Size, page_size: Size, page_index: int = 0):
        self.canvas_size = canvas_size
        self.page_size = page_size
        self.page_index = page_index
        self.state = CaptureState.IDLE
        self.area: Optional[NormalizedArea] = None
        self._start: Optional[Point] = None
        self._current: Optional[PixelRect] = None

    @property
    def current_rect(self) -> Optional[PixelRect]:
        """In-flight rectangle while dragging (may have zero area)"""
        return self._current

    def begin_drag(self, point: Point) -> None:
        if self.state not in (CaptureState.IDLE, CaptureState.COMMITTED):
            raise InvalidCaptureState(f"Cannot start a drag while {self.state.value}")

        if self.area is not None:
            logger.debug("New drag started, discarding committed signature area")
        self.area = None
        self._start = point
        self._current = PixelRect(x=point.x, y=point.y, width=0, height=0)
        self.state = CaptureState.DRAGGING

    def drag_to(self, point: Point) -> PixelRect:
        if self.state != CaptureState.DRAGGING:
            raise InvalidCaptureState(f"Cannot drag while {self.state.value}")

        self._current = PixelRect.from_drag(self._start, point)
        return self._current

    def release(self, point: Point) -> NormalizedArea:
        """
        Finish the drag and try to commit the rectangle

        Raises:
            SignatureValidationError: state is back at idle, nothing committed
        """
        if self.state != CaptureState.DRAGGING:
            raise InvalidCaptureState(f"Cannot release while {self.state.value}")

        candidate = PixelRect.from_drag(self._start, point)
        self.state = CaptureState.CANDIDATE
        self._start = None
        self._current = None
        return self._commit(candidate, previous=None)

    def commit_rect(self, rect: PixelRect) -> NormalizedArea:
        """
        Commit a rectangle delivered in one piece

        On failure the previously committed area, if any, is kept.
        """
        if self.state not in (CaptureState.IDLE, CaptureState.COMMITTED):
            raise InvalidCaptureState(f"Cannot commit a rectangle while {self.state.value}")

        previous = self.area
        self.state = CaptureState.CANDIDATE
        return self._commit(rect, previous=previous)

    def _commit(self, candidate: PixelRect, previous: Optional[NormalizedArea]) -> NormalizedArea:
        try:
            area = normalize(candidate, self.canvas_size, self.page_size, self.page_index)
        except SignatureValidationError as e:
            logger.info(f"Signature area rejected ({e.reason.value}): {e.message}")
            self.area = previous
            self.state = CaptureState.COMMITTED if previous is not None else CaptureState.IDLE
            raise

        self.area = area
        self.state = CaptureState.COMMITTED
        logger.info(f"Signature area committed on page {self.page_index}: {area}")
        return area

    def clear(self) -> None:
        if self.state == CaptureState.DRAGGING:
            self._start = None
            self._current = None
        self.area = None
        self.state = CaptureState.IDLE

    def reset_for_document(self, canvas_size: Size, page_size: Size, page_index: int = 0) -> None:
        """New source document or page: geometry changes and the area is dropped"""
        self.canvas_size = canvas_size
        self.page_size = page_size
        self.page_index = page_index
        self.clear()
