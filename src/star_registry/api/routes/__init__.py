"""
Route registration entry point for the FastAPI application.

Each router module builds an ``APIRouter`` bound to the registry instance it
is given, the same way the server wires its single ``StarRegistry``.
"""

from fastapi import FastAPI

from star_registry.api.routes import blocks, claims, health
from star_registry.core.registry import StarRegistry


def register_routes(app: FastAPI, registry: StarRegistry) -> None:
    """Register all API routes with the FastAPI app."""
    app.include_router(health.router(registry))
    app.include_router(blocks.router(registry))
    app.include_router(claims.router(registry))
