"""API endpoint for wireframe rasterization."""

import asyncio
from typing import Any

from fastapi import APIRouter

from app.core.logging import get_logger
from app.core.schemas_use_cases import WireframeRequest
from app.core.wireframes import render_wireframe

logger = get_logger(__name__)

router = APIRouter()


@router.post("/generate-wireframe")
async def generate_wireframe(request: WireframeRequest) -> dict[str, Any]:
    """Render a search or form wireframe as a PNG data URI."""
    image_url = await asyncio.to_thread(
        render_wireframe,
        request.type,
        request.title,
        filters=request.filters,
        columns=request.columns,
        fields=request.fields,
    )
    logger.info(f"Rendered {request.type} wireframe", extra={"title": request.title})
    return {"success": True, "imageUrl": image_url, "type": request.type}
