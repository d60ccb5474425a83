"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .options import router as options_router
from .returns import router as returns_router

api_router = APIRouter()
api_router.include_router(returns_router, prefix="/equities", tags=["equities"])
api_router.include_router(options_router, prefix="/options", tags=["options"])

__all__ = ["api_router"]
