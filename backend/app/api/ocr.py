import os
import time

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import PlainTextResponse

from app.api.deps import get_ocr_client
from app.core.config import Settings, get_settings
from app.core.errors import OcrError
from app.models.schemas import MarkdownRequest, UploadedFile
from app.services.markdown_formatter import format_as_markdown
from app.services.ocr_client import OcrSpaceClient
from app.services.ocr_normalizer import normalize_ocr_response
from app.services.upload_validator import DEFAULT_FILENAME, validate_upload
from app.utils.logger import (
    log_error_with_trace,
    log_operation_end,
    log_operation_start,
    log_performance,
    logger,
)

router = APIRouter()

TEXT_PLAIN = "text/plain; charset=utf-8"


def _upload_size(file: UploadFile) -> int | None:
    if file.size is not None:
        return file.size
    # Spooled upload without a recorded size: measure without reading it.
    try:
        file.file.seek(0, os.SEEK_END)
        size = file.file.tell()
        file.file.seek(0)
        return size
    except (AttributeError, OSError):
        return None


@router.post("", response_class=PlainTextResponse)
async def ocr_pdf(
    file: UploadFile | None = File(None),
    client: OcrSpaceClient = Depends(get_ocr_client),
    settings: Settings = Depends(get_settings),
):
    overall_start = time.time()

    has_content = file is not None and file.file is not None
    raw_name = file.filename if file is not None else None
    filename = raw_name or DEFAULT_FILENAME
    content_type = (file.content_type if file is not None else None) or ""
    size = _upload_size(file) if has_content else None

    log_operation_start(
        "ocr_pdf",
        metadata={
            "filename": filename,
            "content_type": content_type,
            "size_bytes": size,
        },
    )

    try:
        validate_upload(
            raw_name,
            content_type,
            size,
            has_content=has_content,
            max_bytes=settings.OCR_MAX_UPLOAD_BYTES,
        )
    except OcrError as e:
        logger.warning(f"Rejected upload {filename}: {e.message}")
        raise

    upload = UploadedFile(
        name=filename,
        declared_mime_type=content_type,
        size_bytes=size,
        content=await file.read(),
    )

    step_start = time.time()
    try:
        envelope = await client.submit(upload)
        result = normalize_ocr_response(envelope)
    except OcrError as e:
        log_performance(
            "ocr_submit",
            (time.time() - step_start) * 1000,
            success=False,
            metadata={"filename": filename},
            error=e.message,
        )
        raise
    except Exception as e:
        log_error_with_trace("ocr_submit", e, {"filename": filename})
        raise

    log_performance(
        "ocr_submit",
        (time.time() - step_start) * 1000,
        success=True,
        metadata={
            "filename": filename,
            "pages": len(result.pages),
            "text_length": len(result.combined_text),
        },
    )

    headers = {}
    if result.is_empty:
        logger.info(f"No text parsed from {filename}")
        headers["X-OCR-Empty"] = "true"

    log_operation_end(
        "ocr_pdf",
        (time.time() - overall_start) * 1000,
        metadata={"filename": filename, "pages": len(result.pages)},
    )
    return PlainTextResponse(result.combined_text, media_type=TEXT_PLAIN, headers=headers)


@router.post("/markdown", response_class=PlainTextResponse)
def ocr_markdown(req: MarkdownRequest):
    md = format_as_markdown(req.file_name, req.text)
    return PlainTextResponse(md, media_type="text/markdown; charset=utf-8")
