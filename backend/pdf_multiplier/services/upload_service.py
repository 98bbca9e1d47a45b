"""Batch upload of duplicated documents to per-user folders"""
from pydantic import BaseModel
from typing import Any, Callable, Dict, List, Optional, Sequence
import logging
from ..exceptions import EmptyRecipientList
from ..models.duplication import DuplicationResult
from ..models.humand import UploadOutcome, UploadReport
from ..models.recipient import Recipient
from ..models.signature import NormalizedArea
from ..utils.helpers import progress_percentage
from .coordinate_transform import check_area, denormalize
from .humand_client import HumandClient
from .pdf_backend import PdfBackend, PyMuPdfBackend, read_page_size

logger = logging.getLogger(__name__)

SIGNATURE_PENDING = "PENDING"
SIGNATURE_NOT_NEEDED = "SIGNATURE_NOT_NEEDED"


class UploadProgress(BaseModel):
    """Progress event emitted after each uploaded document"""
    current: int
    total: int
    recipient_name: str
    filename: str
    percentage: int


class PendingUpload(BaseModel):
    """One document waiting to be uploaded"""
    recipient: Recipient
    filename: str
    content: bytes

    @classmethod
    def from_result(cls, result: DuplicationResult) -> "PendingUpload":
        return cls(recipient=result.recipient, filename=result.filename, content=result.content)


class DocumentUploader:
    """Upload every document of a batch, one at a time"""

    def __init__(self, client: HumandClient, backend: Optional[PdfBackend] = None):
        self.client = client
        self.backend = backend or PyMuPdfBackend()

    def signature_coordinates(self, content: bytes, area: NormalizedArea) -> List[Dict[str, Any]]:
        """Area in points, placed on this document's own page"""
        page_size = read_page_size(content, area.page, self.backend)
        rect = denormalize(area, page_size)
        return [rect.model_dump()]

    async def upload_all(
        self,
        documents: Sequence[PendingUpload],
        folder_id: Any,
        signature_status: str = SIGNATURE_NOT_NEEDED,
        area: Optional[NormalizedArea] = None,
        send_notification: bool = False,
        on_progress: Optional[Callable[[UploadProgress], None]] = None,
    ) -> UploadReport:
        """
        Upload documents to each recipient's folder

        Args:
            documents: Successful duplication results
            folder_id: Destination folder
            signature_status: Humand signature status for every document
            area: Signature area, sent only when a signature is pending
            send_notification: Whether Humand notifies the user
            on_progress: Called after each document

        Returns:
            UploadReport with successful and failed uploads

        Raises:
            EmptyRecipientList: no documents given
            SignatureValidationError: the area leaves the unit square
        """
        if not documents:
            raise EmptyRecipientList("At least one document is required")
        if area is not None and signature_status == SIGNATURE_PENDING:
            check_area(area)

        total = len(documents)
        report = UploadReport()
        logger.info(f"Uploading {total} documents to folder {folder_id} (signature: {signature_status})")

        for index, document in enumerate(documents, start=1):
            outcome = await self._upload_one(document, folder_id, signature_status, area, send_notification)
            if outcome.status == "success":
                report.successful.append(outcome)
            else:
                report.failed.append(outcome)

            if on_progress:
                on_progress(UploadProgress(
                    current=index,
                    total=total,
                    recipient_name=document.recipient.label,
                    filename=document.filename,
                    percentage=progress_percentage(index, total),
                ))

        logger.info(f"Upload finished: {len(report.successful)}/{total} succeeded")
        return report

    async def _upload_one(
        self,
        document: PendingUpload,
        folder_id: Any,
        signature_status: str,
        area: Optional[NormalizedArea],
        send_notification: bool,
    ) -> UploadOutcome:
        recipient = document.recipient
        base = {
            "filename": document.filename,
            "user_id": recipient.upload_id,
            "user_name": recipient.label,
            "email": recipient.email,
        }

        try:
            if not recipient.upload_id:
                raise ValueError("Recipient has no user id")

            coordinates = None
            if area is not None and signature_status == SIGNATURE_PENDING:
                coordinates = self.signature_coordinates(document.content, area)

            response = await self.client.upload_document(
                recipient.upload_id,
                document.content,
                document.filename,
                folder_id=folder_id,
                signature_status=signature_status,
                signature_coordinates=coordinates,
                send_notification=send_notification,
            )
        except Exception as e:
            logger.error(f"Error uploading {document.filename}: {e}")
            return UploadOutcome(status="error", error=str(e), **base)

        if response.success:
            return UploadOutcome(status="success", upload_data=response.data, status_code=response.status_code, **base)
        return UploadOutcome(status="error", error=response.error, status_code=response.status_code, **base)
