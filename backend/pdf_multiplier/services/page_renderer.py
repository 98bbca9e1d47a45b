"""Page preview rendering for signature area selection"""
import fitz  # PyMuPDF
from PIL import Image, ImageDraw
import io
import base64
from typing import Optional, Tuple
import logging
from ..exceptions import DocumentLoadError
from ..models.response import PagePreview
from ..models.signature import NormalizedArea, Size

logger = logging.getLogger(__name__)


class PageRenderer:
    """Render PDF pages to PNG so the operator can draw the signature area"""

    def __init__(self, default_scale: float = 1.5):
        """
        Initialize page renderer

        Args:
            default_scale: Zoom used when the caller does not give one
        """
        self.default_scale = default_scale
        logger.info("PageRenderer initialized")

    def render_page(
        self,
        pdf_bytes: bytes,
        page_number: int = 0,
        scale: Optional[float] = None,
        area: Optional[NormalizedArea] = None,
    ) -> PagePreview:
        """
        Render one page as a base64 PNG

        The returned canvas_size is the pixel size of the image and page_size
        is the page in points at scale 1.0, which together are what
        normalize() needs for a rectangle drawn on this image.

        Args:
            pdf_bytes: PDF file content
            page_number: Page to render (0-indexed)
            scale: Zoom factor
            area: Committed signature area to highlight

        Returns:
            PagePreview
        """
        scale = scale or self.default_scale
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")

        try:
            doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            raise DocumentLoadError(f"Could not open PDF: {e}") from e

        try:
            if page_number < 0 or page_number >= len(doc):
                raise ValueError(f"Page {page_number} out of range (document has {len(doc)} pages)")

            page = doc[page_number]
            page_rect = page.rect

            mat = fitz.Matrix(scale, scale)
            pix = page.get_pixmap(matrix=mat, alpha=False)
            img = Image.frombytes("RGB", [pix.width, pix.height], pix.samples)

            if area is not None and area.page == page_number:
                img = self._highlight_area(img, area)

            page_count = len(doc)
        finally:
            doc.close()

        logger.debug(f"Rendered page {page_number} at {scale}x: {img.width}x{img.height}px")
        return PagePreview(
            page=page_number,
            page_count=page_count,
            scale=scale,
            image_base64=self._image_to_base64(img),
            canvas_size=Size(width=img.width, height=img.height),
            page_size=Size(width=page_rect.width, height=page_rect.height),
        )

    def _highlight_area(
        self,
        img: Image.Image,
        area: NormalizedArea,
        color: Tuple[int, int, int, int] = (37, 99, 235, 60)
    ) -> Image.Image:
        """Overlay the normalized area on the rendered image"""
        x0 = int(area.x * img.width)
        y0 = int(area.y * img.height)
        x1 = int((area.x + area.width) * img.width)
        y1 = int((area.y + area.height) * img.height)

        overlay = Image.new('RGBA', img.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        draw.rectangle([x0, y0, x1, y1], fill=color, outline=color[:3] + (255,), width=2)

        img = img.convert('RGBA')
        img = Image.alpha_composite(img, overlay)
        return img.convert('RGB')

    def _image_to_base64(self, img: Image.Image) -> str:
        """Convert PIL Image to base64 string"""
        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        return base64.b64encode(buffered.getvalue()).decode('utf-8')
