"""Humand HR catalog and upload models"""
from pydantic import BaseModel, Field
from typing import Any, List, Optional


class SegmentationItem(BaseModel):
    """Selectable segment inside a segmentation group"""
    name: str  # item id as string
    item_name: str
    display_name: str
    user_count: int = 0


class Segmentation(BaseModel):
    """Segmentation group"""
    group: str
    group_name: str
    display_name: str
    items: List[SegmentationItem] = Field(default_factory=list)


class Folder(BaseModel):
    """Per-user document folder"""
    id: Any
    name: str
    description: str = ""
    parent_id: Optional[Any] = None
    created_at: Optional[str] = None


class UploadResponse(BaseModel):
    """Result of one document upload call"""
    success: bool
    data: Optional[Any] = None
    status_code: Optional[int] = None
    error: Optional[str] = None


class UploadOutcome(BaseModel):
    """Per-document entry of a batch upload"""
    filename: str
    user_id: Optional[str] = None
    user_name: str = ""
    email: str = ""
    status: str  # "success" or "error"
    upload_data: Optional[Any] = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class UploadReport(BaseModel):
    """Result of a batch upload"""
    successful: List[UploadOutcome] = Field(default_factory=list)
    failed: List[UploadOutcome] = Field(default_factory=list)

    @property
    def stats(self) -> dict:
        total = len(self.successful) + len(self.failed)
        return {
            "total": total,
            "successful": len(self.successful),
            "failed": len(self.failed),
            "success_rate": (len(self.successful) / total) * 100 if total else 0.0,
        }
