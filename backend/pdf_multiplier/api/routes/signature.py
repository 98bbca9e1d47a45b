"""Signature area endpoints: page preview and coordinate normalization"""
from fastapi import APIRouter, UploadFile, File, HTTPException, Depends, Form
from typing import Optional
import logging
from pydantic import ValidationError
from ...exceptions import DocumentLoadError, SignatureValidationError
from ...models.response import NormalizeRequest, PagePreview
from ...models.signature import NormalizedArea
from ...services import PageRenderer, normalize
from ...api.dependencies import get_page_renderer
from ...api.files import read_pdf_upload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/signature", tags=["signature"])


@router.post("/preview", response_model=PagePreview)
async def preview_page(
    pdf: UploadFile = File(...),
    page: int = Form(0),
    scale: Optional[float] = Form(None),
    signature_area: Optional[str] = Form(None),
    renderer: PageRenderer = Depends(get_page_renderer)
):
    """
    Render a page for drawing the signature area

    The response carries the canvas size (image pixels) and the page size
    (points); send both back with the drawn rectangle to /normalize.
    """
    content = await read_pdf_upload(pdf)

    try:
        area = NormalizedArea.model_validate_json(signature_area) if signature_area else None
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid signature area: {e}")

    try:
        return renderer.render_page(content, page_number=page, scale=scale, area=area)
    except DocumentLoadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error rendering preview: {e}")
        raise HTTPException(status_code=500, detail=f"Error rendering preview: {str(e)}")


@router.post("/normalize", response_model=NormalizedArea)
async def normalize_area(request: NormalizeRequest):
    """Convert a rectangle drawn on the preview into a scale-independent area"""
    try:
        return normalize(request.rect, request.canvas_size, request.page_size, request.page)
    except SignatureValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"reason": e.reason.value, "message": e.message}
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
