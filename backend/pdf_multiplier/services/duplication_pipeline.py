"""Batch duplication of one source PDF into one copy per recipient"""
from typing import Callable, List, Optional, Sequence, Union
import logging
from ..exceptions import (
    EmptyRecipientList,
    SignatureValidationError,
    ValidationReason,
)
from ..models.duplication import (
    BatchReport,
    DuplicationProgress,
    DuplicationResult,
    NamingPattern,
)
from ..models.recipient import Recipient
from ..models.signature import NormalizedArea
from ..utils.helpers import generate_filename, progress_percentage
from .coordinate_transform import check_area, denormalize
from .pdf_backend import PdfBackend, PyMuPdfBackend, RectangleStyle

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[DuplicationProgress], None]


class DuplicationPipeline:
    """Produce one personalized PDF per recipient"""

    def __init__(self, backend: Optional[PdfBackend] = None, style: Optional[RectangleStyle] = None):
        """
        Initialize duplication pipeline

        Args:
            backend: PDF operations (PyMuPDF by default)
            style: Appearance of the signature placeholder
        """
        self.backend = backend or PyMuPdfBackend()
        self.style = style or RectangleStyle()

    def duplicate_for_all(
        self,
        source: bytes,
        recipients: Sequence[Recipient],
        naming_pattern: Union[NamingPattern, str] = NamingPattern.USERNAME,
        prefix: str = "",
        area: Optional[NormalizedArea] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchReport:
        """
        Duplicate the source document for every recipient

        Recipients are processed one at a time, in input order. A failure for
        one recipient is recorded in its result and the batch moves on.

        Args:
            source: Source PDF bytes
            recipients: Target users, in output order
            naming_pattern: Filename identifier source
            prefix: Optional filename prefix
            area: Signature area to draw on each copy
            on_progress: Called after each recipient with one DuplicationProgress
                carrying current, total, recipient_name and percentage, rather
                than with those four values as separate arguments

        Returns:
            BatchReport with exactly one result per recipient

        Raises:
            EmptyRecipientList: no recipients given
            DocumentLoadError: the source itself cannot be opened
            SignatureValidationError: the area leaves the unit square or points at a
                page the source does not have
        """
        if not recipients:
            raise EmptyRecipientList("At least one recipient is required")

        naming_pattern = NamingPattern(naming_pattern)
        self._check_source(source, area)

        total = len(recipients)
        logger.info(
            f"Duplicating PDF for {total} recipients "
            f"(pattern: {naming_pattern.value}, prefix: {prefix!r}, signature area: {area is not None})"
        )

        results: List[DuplicationResult] = []
        for index, recipient in enumerate(recipients, start=1):
            result = self._duplicate_one(source, recipient, naming_pattern, prefix, area)
            results.append(result)

            if on_progress:
                on_progress(DuplicationProgress(
                    current=index,
                    total=total,
                    recipient_name=recipient.label,
                    percentage=progress_percentage(index, total),
                ))

        report = BatchReport(results=tuple(results))
        stats = report.stats
        logger.info(f"Duplication finished: {stats['successful']}/{stats['total']} succeeded, {stats['failed']} failed")
        return report

    def _check_source(self, source: bytes, area: Optional[NormalizedArea]) -> None:
        """Fail the whole batch early if the source is unusable"""
        if area is not None:
            check_area(area)

        handle = self.backend.load_copy(source)
        try:
            page_count = self.backend.page_count(handle)
        finally:
            self.backend.close(handle)

        if area is not None and area.page >= page_count:
            raise SignatureValidationError(
                ValidationReason.OUT_OF_BOUNDS,
                f"Signature area is on page {area.page} but the document has {page_count} pages",
            )

    def _duplicate_one(
        self,
        source: bytes,
        recipient: Recipient,
        naming_pattern: NamingPattern,
        prefix: str,
        area: Optional[NormalizedArea],
    ) -> DuplicationResult:
        # Filename first so that failures can still be reported by name
        filename = generate_filename(recipient, naming_pattern, prefix)

        try:
            handle = self.backend.load_copy(source)
        except Exception as e:
            logger.error(f"Error loading copy for {recipient.label}: {e}")
            return DuplicationResult.failure(recipient, filename, str(e))

        try:
            if area is not None:
                self._apply_signature_area(handle, area, recipient)

            content = self.backend.to_bytes(handle)
        except Exception as e:
            logger.error(f"Error serializing copy for {recipient.label}: {e}")
            return DuplicationResult.failure(recipient, filename, str(e))
        finally:
            self.backend.close(handle)

        logger.debug(f"Produced {filename} ({len(content)} bytes) for {recipient.label}")
        return DuplicationResult.success(recipient, filename, content)

    def _apply_signature_area(self, handle, area: NormalizedArea, recipient: Recipient) -> None:
        """Draw the signature placeholder; the copy is delivered without it on any error"""
        try:
            page_size = self.backend.page_size(handle, area.page)
            rect = denormalize(area, page_size)
            self.backend.draw_rectangle(handle, area.page, rect, self.style)
        except Exception as e:
            logger.warning(f"Signature area skipped for {recipient.label}: {e}")
