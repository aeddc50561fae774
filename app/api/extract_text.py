"""API endpoint for minute file text extraction."""

from typing import Any

from fastapi import APIRouter, File, HTTPException, UploadFile

from app.core.config import get_settings
from app.core.file_text import FileProcessingError, UnsupportedFileError, extract_text_from_upload
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/extract-text")
async def extract_text(file: UploadFile = File(...)) -> dict[str, Any]:
    """
    Extract plain text from an uploaded minute (.docx, .xlsx/.xls, .pptx or text).

    Raises:
        HTTPException 400: If the file kind is unsupported (.ppt gets a conversion hint)
        HTTPException 413: If the file exceeds MAX_UPLOAD_BYTES
        HTTPException 500: If a supported file cannot be parsed
    """
    settings = get_settings()
    raw_bytes = await file.read()
    if len(raw_bytes) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {settings.MAX_UPLOAD_BYTES} bytes.",
        )

    filename = file.filename or "unknown"
    try:
        result = extract_text_from_upload(
            filename=filename,
            content_type=file.content_type,
            raw_bytes=raw_bytes,
        )
    except UnsupportedFileError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except FileProcessingError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    logger.info(
        f"Extracted text from {filename}",
        extra={"kind": result.kind, "chars": len(result.text)},
    )
    return {"text": result.text, "filename": filename}
