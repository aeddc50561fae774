"""API endpoint for field-level AI assistance."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_orchestrator
from app.chains.improve_field import improve_field
from app.core.logging import get_logger
from app.core.orchestrator import Orchestrator
from app.core.schemas_use_cases import ImproveFieldRequest

logger = get_logger(__name__)

router = APIRouter()


@router.post("/ai-assist")
async def ai_assist(
    request: ImproveFieldRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    Improve one form field, or derive filters/columns/fields from free text.

    Provider failures degrade to the offline improvement inside the chain, so a
    value is always returned.

    Raises:
        HTTPException 400: If fieldName or fieldType is missing
    """
    if not request.field_name or not request.field_type:
        raise HTTPException(status_code=400, detail="Field name and type are required")

    logger.info(
        f"AI assist for {request.field_name}",
        extra={"field_type": request.field_type, "provider": request.ai_model.value},
    )
    improved = await improve_field(
        request.field_name,
        request.field_value,
        request.field_type,
        request.context,
        request.ai_model.value,
        orchestrator,
    )
    return {"improvedValue": improved}
