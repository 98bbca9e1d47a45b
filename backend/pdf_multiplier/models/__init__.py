"""Data models for the application"""
from .signature import Point, Size, PixelRect, PageRect, NormalizedArea
from .recipient import Recipient
from .duplication import (
    NamingPattern,
    Outcome,
    DuplicationProgress,
    DuplicationResult,
    BatchReport,
)
from .humand import (
    Segmentation,
    SegmentationItem,
    Folder,
    UploadResponse,
    UploadOutcome,
    UploadReport,
)
from .response import (
    UsersRequest,
    NormalizeRequest,
    PagePreview,
    DuplicatedDocument,
    DuplicationFailure,
    DuplicationResponse,
    UploadDocumentsRequest,
)

__all__ = [
    "Point",
    "Size",
    "PixelRect",
    "PageRect",
    "NormalizedArea",
    "Recipient",
    "NamingPattern",
    "Outcome",
    "DuplicationProgress",
    "DuplicationResult",
    "BatchReport",
    "Segmentation",
    "SegmentationItem",
    "Folder",
    "UploadResponse",
    "UploadOutcome",
    "UploadReport",
    "UsersRequest",
    "NormalizeRequest",
    "PagePreview",
    "DuplicatedDocument",
    "DuplicationFailure",
    "DuplicationResponse",
    "UploadDocumentsRequest",
]
