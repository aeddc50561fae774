"""API router for the use case document endpoints."""

from fastapi import APIRouter

from app.api import ai_assist, exports, extract_text, minutes, test_cases, use_cases, wireframes

router = APIRouter()

# Use case generation, editing and retrieval
router.include_router(use_cases.router, tags=["use_cases"])

# Field-level assistance
router.include_router(ai_assist.router, tags=["ai_assist"])

# Minute analysis and minute file extraction
router.include_router(minutes.router, tags=["minutes"])
router.include_router(extract_text.router, tags=["minutes"])

# Intelligent test cases
router.include_router(test_cases.router, tags=["test_cases"])

# Document export and wireframes
router.include_router(exports.router, tags=["exports"])
router.include_router(wireframes.router, tags=["wireframes"])
