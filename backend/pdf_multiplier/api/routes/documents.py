"""Document duplication and upload endpoints"""
from fastapi import APIRouter, UploadFile, File, HTTPException, Depends, Form, Request
from fastapi.responses import StreamingResponse
from typing import List, Optional
import asyncio
import base64
import binascii
import json
import logging
from pydantic import ValidationError
from ...config import settings
from ...exceptions import DocumentLoadError, EmptyRecipientList, SignatureValidationError
from ...models.duplication import BatchReport, NamingPattern
from ...models.recipient import Recipient
from ...models.response import (
    DuplicatedDocument,
    DuplicationFailure,
    DuplicationResponse,
    UploadDocumentsRequest,
)
from ...models.signature import NormalizedArea
from ...services import DocumentUploader, DuplicationPipeline, PendingUpload
from ...api.dependencies import get_document_uploader, get_duplication_pipeline
from ...api.files import read_pdf_upload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/documents", tags=["documents"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def _wants_event_stream(request: Request) -> bool:
    return "text/event-stream" in request.headers.get("accept", "")


def _sse(payload) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def _parse_recipients(users: str) -> List[Recipient]:
    try:
        raw_users = json.loads(users)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Users must be a JSON array: {e}")

    if not isinstance(raw_users, list) or not raw_users:
        raise HTTPException(status_code=400, detail="At least one user is required")
    if len(raw_users) > settings.max_users_per_batch:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_users_per_batch} users per batch"
        )
    if not all(isinstance(user, dict) for user in raw_users):
        raise HTTPException(status_code=400, detail="Every user must be a JSON object")

    return [Recipient.from_humand(user) for user in raw_users]


def _build_duplication_response(report: BatchReport) -> DuplicationResponse:
    """Successes with base64 content, failures with their reason"""
    return DuplicationResponse(
        success=True,
        data=[
            DuplicatedDocument(
                user=result.recipient,
                filename=result.filename,
                buffer=base64.b64encode(result.content).decode("utf-8"),
                size=result.size,
            )
            for result in report.successes
        ],
        errors=[
            DuplicationFailure(user=result.recipient, filename=result.filename, error=result.error or "")
            for result in report.failures
        ],
        stats=report.stats,
    )


@router.post("/duplicate")
async def duplicate_documents(
    request: Request,
    pdf: UploadFile = File(...),
    users: str = Form(...),
    naming_pattern: NamingPattern = Form(NamingPattern.USERNAME),
    prefix: str = Form(""),
    signature_area: Optional[str] = Form(None),
    pipeline: DuplicationPipeline = Depends(get_duplication_pipeline)
):
    """
    Produce one copy of the uploaded PDF per user

    Steps:
    1. Validate the PDF and the user list
    2. Duplicate sequentially, drawing the signature area on each copy
    3. Return successes (base64) and failures with their filenames

    With `Accept: text/event-stream` the response is an SSE stream of
    `progress` events followed by one `complete` event carrying the result.
    """
    content = await read_pdf_upload(pdf)
    recipients = _parse_recipients(users)

    try:
        area = NormalizedArea.model_validate_json(signature_area) if signature_area else None
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid signature area: {e}")

    logger.info(f"Duplication requested: {pdf.filename} for {len(recipients)} users")

    if _wants_event_stream(request):
        return StreamingResponse(
            _duplication_events(pipeline, content, recipients, naming_pattern, prefix, area),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    try:
        report = await asyncio.to_thread(
            pipeline.duplicate_for_all,
            content,
            recipients,
            naming_pattern,
            prefix,
            area,
        )
        return _build_duplication_response(report)
    except (DocumentLoadError, EmptyRecipientList) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SignatureValidationError as e:
        raise HTTPException(status_code=422, detail={"reason": e.reason.value, "message": e.message})
    except Exception as e:
        logger.error(f"Error duplicating documents: {e}")
        raise HTTPException(status_code=500, detail=f"Error duplicating documents: {str(e)}")


async def _duplication_events(pipeline, content, recipients, naming_pattern, prefix, area):
    """Run the pipeline in a worker thread and relay its progress as SSE"""
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def on_progress(progress):
        loop.call_soon_threadsafe(queue.put_nowait, progress)

    def run():
        try:
            return pipeline.duplicate_for_all(
                content, recipients, naming_pattern, prefix, area, on_progress=on_progress
            )
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, None)

    task = asyncio.ensure_future(asyncio.to_thread(run))
    try:
        while True:
            progress = await queue.get()
            if progress is None:
                break
            yield _sse({"type": "progress", **progress.model_dump()})

        report = await task
        yield _sse({"type": "complete", **_build_duplication_response(report).model_dump()})
    except Exception as e:
        logger.error(f"Error in streaming duplication: {e}")
        yield _sse({"type": "error", "message": str(e)})

    yield "data: [DONE]\n\n"


def _decode_documents(payload: UploadDocumentsRequest) -> List[PendingUpload]:
    documents = []
    for document in payload.documents:
        try:
            content = base64.b64decode(document.buffer, validate=True)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=400, detail=f"Document {document.filename} is not valid base64")
        documents.append(PendingUpload(recipient=document.user, filename=document.filename, content=content))
    return documents


@router.post("/upload")
async def upload_documents(
    request: Request,
    payload: UploadDocumentsRequest,
    uploader: DocumentUploader = Depends(get_document_uploader)
):
    """
    Upload duplicated documents to each user's folder

    With `Accept: text/event-stream` the response is an SSE stream of
    `progress` events followed by one `complete` event.
    """
    if not payload.documents:
        raise HTTPException(status_code=400, detail="At least one document is required")
    if payload.folder_id in (None, ""):
        raise HTTPException(status_code=400, detail="A destination folder is required")
    if len(payload.documents) > settings.max_users_per_batch:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {settings.max_users_per_batch} documents per request"
        )

    documents = _decode_documents(payload)
    logger.info(f"Upload requested: {len(documents)} documents to folder {payload.folder_id}")

    upload_kwargs = dict(
        folder_id=payload.folder_id,
        signature_status=payload.signature_status,
        area=payload.signature_area,
        send_notification=payload.send_notification,
    )

    if _wants_event_stream(request):
        return StreamingResponse(
            _upload_events(uploader, documents, upload_kwargs),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    try:
        report = await uploader.upload_all(documents, **upload_kwargs)
        return {
            "success": True,
            "data": {
                "successful": [o.model_dump() for o in report.successful],
                "failed": [o.model_dump() for o in report.failed],
            },
            "stats": report.stats,
        }
    except SignatureValidationError as e:
        raise HTTPException(status_code=422, detail={"reason": e.reason.value, "message": e.message})
    except Exception as e:
        logger.error(f"Error uploading documents: {e}")
        raise HTTPException(status_code=500, detail=f"Error uploading documents: {str(e)}")


async def _upload_events(uploader, documents, upload_kwargs):
    queue: asyncio.Queue = asyncio.Queue()

    async def run():
        try:
            return await uploader.upload_all(documents, on_progress=queue.put_nowait, **upload_kwargs)
        finally:
            queue.put_nowait(None)

    task = asyncio.ensure_future(run())
    try:
        while True:
            progress = await queue.get()
            if progress is None:
                break
            yield _sse({"type": "progress", **progress.model_dump()})

        report = await task
        yield _sse({
            "type": "complete",
            "success": True,
            "stats": report.stats,
            "successful": [o.model_dump() for o in report.successful],
            "failed": [o.model_dump() for o in report.failed],
        })
    except Exception as e:
        logger.error(f"Error in streaming upload: {e}")
        yield _sse({"type": "error", "message": str(e)})

    yield "data: [DONE]\n\n"
