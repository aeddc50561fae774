"""API endpoint for .docx export."""

import asyncio
import re
from urllib.parse import quote

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import ValidationError

from app.core.content_sanitizer import clean_file_name
from app.core.logging import get_logger
from app.core.schemas_use_cases import ExportRequest, UseCaseForm
from app.core.use_case_document import build_use_case_document

logger = get_logger(__name__)

router = APIRouter()

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DEFAULT_FILE_NAME = "caso-de-uso"

_UNSAFE_FILE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ExportError(Exception):
    """Export request without the form data the document is built from."""


def content_disposition(file_name: str) -> str:
    """Attachment header for file_name.docx; non-ASCII names also get an RFC 5987 filename*."""
    safe_name = _UNSAFE_FILE_NAME_CHARS.sub("_", file_name).strip("_") or DEFAULT_FILE_NAME
    header = f'attachment; filename="{safe_name}.docx"'
    if safe_name != file_name:
        header += f"; filename*=UTF-8''{quote(file_name + '.docx', safe='')}"
    return header


def form_for_export(request: ExportRequest) -> UseCaseForm:
    """
    Read the export form data.

    Raises:
        ExportError: If formData is absent or empty
        ValidationError: If formData does not describe a form
    """
    if not request.form_data:
        raise ExportError(
            "formData is required for DOCX export. The HTML conversion method is deprecated."
        )
    return UseCaseForm.model_validate(request.form_data)


@router.post("/export-docx")
async def export_docx(request: ExportRequest) -> Response:
    """
    Render the use case document from form data.

    Returns:
        The .docx as an attachment named after fileName

    Raises:
        HTTPException 400: If formData is absent or empty
        HTTPException 422: If formData is not a valid form
    """
    try:
        form = form_for_export(request)
    except ExportError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False)) from e

    document = await asyncio.to_thread(
        build_use_case_document,
        form,
        custom_header_image=request.custom_header_image,
        generated_content=request.content,
    )

    file_name = clean_file_name(request.file_name) or DEFAULT_FILE_NAME
    logger.info(f"Exported {file_name}.docx", extra={"size_bytes": len(document)})
    return Response(
        content=document,
        media_type=DOCX_MEDIA_TYPE,
        headers={
            "Content-Disposition": content_disposition(file_name),
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )
