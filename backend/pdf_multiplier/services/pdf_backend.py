"""PDF operations used by the duplication pipeline, implemented with PyMuPDF"""
import fitz  # PyMuPDF
from pydantic import BaseModel
from typing import Protocol, Tuple
import logging
from ..exceptions import AnnotationError, DocumentLoadError, SerializationError
from ..models.signature import PageRect, Size

logger = logging.getLogger(__name__)


class RectangleStyle(BaseModel):
    """How the signature placeholder is drawn on a copy"""
    border_color: Tuple[float, float, float] = (0.7, 0.7, 0.7)
    border_width: float = 1.0
    opacity: float = 0.3
    label: str = "Signature area"
    label_size: float = 8
    label_color: Tuple[float, float, float] = (0.5, 0.5, 0.5)


class PdfBackend(Protocol):
    """Capabilities the pipeline needs from a PDF library"""

    def load_copy(self, data: bytes): ...

    def page_count(self, handle) -> int: ...

    def page_size(self, handle, page_index: int) -> Size: ...

    def draw_rectangle(self, handle, page_index: int, rect: PageRect, style: RectangleStyle) -> None: ...

    def to_bytes(self, handle) -> bytes: ...

    def close(self, handle) -> None: ...


class PyMuPdfBackend:
    """PdfBackend on top of fitz documents opened from memory"""

    def load_copy(self, data: bytes) -> fitz.Document:
        """
        Open an independent document from bytes

        Every call returns a new fitz.Document, so annotating one copy can
        never touch another.
        """
        if not data:
            raise DocumentLoadError("PDF data is empty")
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentLoadError(f"Could not open PDF: {e}") from e

        if doc.page_count == 0:
            doc.close()
            raise DocumentLoadError("PDF has no pages")
        return doc

    def page_count(self, handle: fitz.Document) -> int:
        return handle.page_count

    def page_size(self, handle: fitz.Document, page_index: int) -> Size:
        if page_index < 0 or page_index >= handle.page_count:
            raise IndexError(f"Page {page_index} does not exist (document has {handle.page_count} pages)")
        rect = handle[page_index].rect
        return Size(width=rect.width, height=rect.height)

    def draw_rectangle(
        self,
        handle: fitz.Document,
        page_index: int,
        rect: PageRect,
        style: RectangleStyle,
    ) -> None:
        """Draw the signature placeholder box and its label"""
        try:
            page = handle[page_index]
            box = fitz.Rect(rect.x, rect.y, rect.x + rect.width, rect.y + rect.height)

            shape = page.new_shape()
            shape.draw_rect(box)
            shape.finish(
                color=style.border_color,
                width=style.border_width,
                stroke_opacity=style.opacity,
            )
            shape.commit()

            if style.label:
                # Baseline sits one label-height below the top border
                origin = fitz.Point(box.x0 + 2, box.y0 + style.label_size + 2)
                page.insert_text(
                    origin,
                    style.label,
                    fontsize=style.label_size,
                    fontname="helv",
                    color=style.label_color,
                )
        except Exception as e:
            raise AnnotationError(f"Could not draw signature area on page {page_index}: {e}") from e

    def to_bytes(self, handle: fitz.Document) -> bytes:
        try:
            return handle.tobytes(garbage=3, deflate=True)
        except Exception as e:
            raise SerializationError(f"Could not serialize PDF: {e}") from e

    def close(self, handle: fitz.Document) -> None:
        handle.close()


def read_page_size(data: bytes, page_index: int, backend: PdfBackend = None) -> Size:
    """Open a PDF from bytes and return the size of one page in points"""
    backend = backend or PyMuPdfBackend()
    handle = backend.load_copy(data)
    try:
        return backend.page_size(handle, page_index)
    finally:
        backend.close(handle)
