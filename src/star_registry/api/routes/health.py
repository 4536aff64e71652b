"""Health and root endpoints.

Provides the root ``/`` endpoint (API identity and version) and the
``/health`` endpoint (liveness check with the current chain height).
"""

from fastapi import APIRouter

from star_registry import __version__
from star_registry.api.models import HealthResponse
from star_registry.core.registry import StarRegistry


def router(registry: StarRegistry) -> APIRouter:
    """Build the health router."""
    api = APIRouter()

    @api.get("/")
    async def root():
        """Root endpoint showing API identity and current version."""
        return {"message": "Star Registry API", "version": __version__}

    @api.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(status="ok", height=registry.get_height())

    return api
