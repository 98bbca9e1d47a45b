"""Validation of uploaded PDF files"""
from fastapi import HTTPException, UploadFile
import logging
from ..config import settings

logger = logging.getLogger(__name__)

PDF_MIME_TYPES = ("application/pdf",)


async def read_pdf_upload(file: UploadFile) -> bytes:
    """
    Validate an uploaded PDF and return its content

    Raises:
        HTTPException: 400 when the name, type or size is not acceptable
    """
    errors = []
    filename = file.filename or ""

    if not filename.lower().endswith(".pdf"):
        errors.append("File must have a .pdf extension")
    if file.content_type and file.content_type not in PDF_MIME_TYPES:
        errors.append(f"File must be a PDF (got {file.content_type})")
    if len(filename) > settings.max_filename_length:
        errors.append(f"Filename is too long (maximum {settings.max_filename_length} characters)")

    content = await file.read()
    if not content:
        errors.append("File is empty")
    if len(content) > settings.max_file_size:
        errors.append(f"File size exceeds maximum of {settings.max_file_size} bytes")

    if errors:
        logger.warning(f"Rejected upload {filename!r}: {errors}")
        raise HTTPException(status_code=400, detail={"message": "Invalid PDF file", "errors": errors})

    return content
