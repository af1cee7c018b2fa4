"""
API routes for the calculation core.
"""

from fastapi import APIRouter

from calccore.api import calculations

router = APIRouter()

router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
