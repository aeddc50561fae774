"""API endpoints for use case generation, editing and retrieval."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from app.chains.generate_use_case import edit_use_case, generate_use_case
from app.core.logging import get_logger
from app.core.orchestrator import AggregatedGenerationError, Orchestrator
from app.core.schemas_use_cases import (
    FormRecord,
    UseCaseEditRequest,
    UseCaseEditResponse,
    UseCaseGenerateResponse,
)
from app.api.deps import get_orchestrator
from app.db.use_cases import (
    create_use_case,
    delete_use_case,
    get_use_case,
    list_use_cases,
    update_use_case,
)

logger = get_logger(__name__)

router = APIRouter()

NOT_FOUND_MESSAGE = "Caso de uso no encontrado"
LEGACY_EXPORT_MESSAGE = (
    "Este método de exportación ya no está soportado. Por favor use el botón de exportar "
    "en la interfaz principal que utiliza el método correcto con formData."
)


def _generation_failed(e: AggregatedGenerationError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": str(e),
            "attempts": [{"provider": a.provider, "error": a.error} for a in e.attempts],
        },
    )


@router.post("/use-cases/generate")
async def generate(
    form: FormRecord,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    Generate a use case document and persist the record.

    The record is stored only after generation succeeds.

    Raises:
        HTTPException 422: If the form fails validation
    """
    try:
        generated = await generate_use_case(form, orchestrator)
    except AggregatedGenerationError as e:
        logger.error(f"Use case generation failed: {e}")
        return _generation_failed(e)

    record = create_use_case(
        {**generated.form.to_wire(), "generatedContent": generated.content}
    )
    logger.info(
        f"Generated use case {record['id']} with {generated.provider}",
        extra={"use_case_id": record["id"], "provider": generated.provider},
    )
    return UseCaseGenerateResponse(
        use_case=record,
        content=generated.content,
        expanded_description=generated.expanded_description,
    ).to_wire()


@router.post("/use-cases/{use_case_id}/edit")
async def edit(
    use_case_id: str,
    request: UseCaseEditRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    Apply edit instructions to a stored use case.

    Raises:
        HTTPException 404: If the use case does not exist
    """
    record = get_use_case(use_case_id)
    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)

    try:
        content = await edit_use_case(
            record.get("generatedContent") or "",
            request.instructions,
            request.ai_model.value,
            orchestrator,
        )
    except AggregatedGenerationError as e:
        logger.error(f"Use case edit failed: {e}", extra={"use_case_id": use_case_id})
        return _generation_failed(e)

    updated = update_use_case(use_case_id, {"generatedContent": content})
    return UseCaseEditResponse(use_case=updated, content=content).to_wire()


@router.get("/use-cases")
async def list_all() -> list[dict[str, Any]]:
    return list_use_cases()


@router.get("/use-cases/{use_case_id}")
async def get_one(use_case_id: str) -> dict[str, Any]:
    record = get_use_case(use_case_id)
    if record is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return record


@router.delete("/use-cases/{use_case_id}", status_code=204)
async def delete_one(use_case_id: str) -> Response:
    if not delete_use_case(use_case_id):
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return Response(status_code=204)


@router.get("/use-cases/{use_case_id}/export")
async def legacy_export(use_case_id: str) -> JSONResponse:
    """Retired export path; documents are exported from form data via /export-docx."""
    return JSONResponse(
        status_code=410,
        content={"message": LEGACY_EXPORT_MESSAGE, "code": "LEGACY_EXPORT_DEPRECATED"},
    )
