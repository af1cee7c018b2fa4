"""
Main FastAPI application entry point.
"""

import logging

from fastapi import FastAPI

from calccore import __version__
from calccore.config import get_settings
from calccore.api import router as api_router

settings = get_settings()

logging.basicConfig(level=settings.log_level)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Stateless loan, annuity, valuation, portfolio and classification calculations",
    version=__version__,
    debug=settings.debug,
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}
