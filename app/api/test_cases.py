"""API endpoint for intelligent test case generation."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.api.deps import get_orchestrator
from app.chains.generate_test_cases import TestGenerationError, generate_test_cases
from app.core.logging import get_logger
from app.core.orchestrator import Orchestrator
from app.core.schemas_use_cases import PartialFormRecord, TestCasesRequest

logger = get_logger(__name__)

router = APIRouter()


@router.post("/generate-intelligent-tests", response_model=None)
async def generate_tests(
    request: TestCasesRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any] | JSONResponse:
    """
    Generate objective, preconditions and steps from the current form.

    Raises:
        HTTPException 400: If formData is missing
        HTTPException 422: If formData cannot be read as a form
    """
    if not request.form_data:
        raise HTTPException(status_code=400, detail="Form data is required")

    try:
        form = PartialFormRecord.model_validate(request.form_data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False)) from e

    try:
        result = await generate_test_cases(
            form,
            request.ai_model.value,
            orchestrator,
            suggestions=request.suggestions,
        )
    except TestGenerationError as e:
        logger.error(f"Test case generation failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate intelligent test cases", "success": False},
        )

    return {"success": True, **result.to_wire()}
