"""API endpoint for meeting-minute analysis."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_orchestrator
from app.chains.analyze_minute import analyze_minute
from app.core.logging import get_logger
from app.core.orchestrator import Orchestrator
from app.core.schemas_use_cases import AnalyzeMinuteRequest

logger = get_logger(__name__)

router = APIRouter()


@router.post("/analyze-minute")
async def analyze(
    request: AnalyzeMinuteRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    Turn minute text into a draft form.

    Unusable provider output is replaced by the canned draft for the type.

    Raises:
        HTTPException 400: If no minute content was sent
    """
    if not (request.minute_content or "").strip():
        raise HTTPException(status_code=400, detail="Se requiere contenido de minuta o archivo")

    draft = await analyze_minute(
        request.minute_content,
        request.use_case_type,
        request.ai_model.value,
        orchestrator,
    )
    return {"success": True, "formData": draft.to_wire()}
