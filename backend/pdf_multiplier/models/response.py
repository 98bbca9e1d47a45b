"""API request and response models"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional, Union
from .signature import NormalizedArea, PixelRect, Size
from .recipient import Recipient


class UsersRequest(BaseModel):
    """Request for the users of one or more segmentation items"""
    segmentation_item_ids: List[Union[str, int]] = Field(alias="segmentationItemIds")
    limit: Optional[int] = None

    class Config:
        populate_by_name = True


class NormalizeRequest(BaseModel):
    """Rectangle drawn on a rendered page, plus the geometry it was drawn against"""
    rect: PixelRect
    canvas_size: Size = Field(alias="canvasSize")
    page_size: Size = Field(alias="pageSize")
    page: int = 0

    class Config:
        populate_by_name = True


class PagePreview(BaseModel):
    """Rendered page image and the sizes needed to normalize a drawing on it"""
    page: int
    page_count: int
    scale: float
    image_base64: str
    canvas_size: Size
    page_size: Size


class DuplicatedDocument(BaseModel):
    """One successfully produced copy, ready to be uploaded"""
    user: Recipient
    filename: str
    buffer: str  # base64 encoded PDF
    size: int = 0

    @field_validator("user", mode="before")
    @classmethod
    def _canonical_user(cls, value):
        if isinstance(value, dict):
            return Recipient.from_humand(value)
        return value


class DuplicationFailure(BaseModel):
    """One recipient whose copy could not be produced"""
    user: Recipient
    filename: str
    error: str


class DuplicationResponse(BaseModel):
    """Response for a duplication run"""
    success: bool = True
    data: List[DuplicatedDocument] = Field(default_factory=list)
    errors: List[DuplicationFailure] = Field(default_factory=list)
    stats: Dict[str, Any] = Field(default_factory=dict)


class UploadDocumentsRequest(BaseModel):
    """
    Batch upload request

    Accepts both snake_case and the camelCase spellings the web client
    historically sent; only the canonical names are used past this point.
    """
    documents: List[DuplicatedDocument]
    folder_id: Any = Field(alias="folderId")
    signature_status: str = Field(default="SIGNATURE_NOT_NEEDED", alias="signatureStatus")
    signature_area: Optional[NormalizedArea] = Field(default=None, alias="signatureCoordinates")
    send_notification: bool = Field(default=False, alias="sendNotification")

    class Config:
        populate_by_name = True
