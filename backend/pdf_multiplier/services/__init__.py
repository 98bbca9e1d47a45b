"""Service layer for business logic"""
from .coordinate_transform import normalize, denormalize, to_page_rect
from .signature_capture import SignatureCapture, CaptureState
from .pdf_backend import PdfBackend, PyMuPdfBackend, RectangleStyle
from .page_renderer import PageRenderer
from .duplication_pipeline import DuplicationPipeline
from .cache import ResponseCache, TTLCache, NullCache
from .humand_client import HumandClient, RedashConfig
from .upload_service import DocumentUploader, PendingUpload, UploadProgress

__all__ = [
    "normalize",
    "denormalize",
    "to_page_rect",
    "SignatureCapture",
    "CaptureState",
    "PdfBackend",
    "PyMuPdfBackend",
    "RectangleStyle",
    "PageRenderer",
    "DuplicationPipeline",
    "ResponseCache",
    "TTLCache",
    "NullCache",
    "HumandClient",
    "RedashConfig",
    "DocumentUploader",
    "PendingUpload",
    "UploadProgress",
]
