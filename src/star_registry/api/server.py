"""
FastAPI server for the star registry.

This module builds the FastAPI application that exposes the registry
operations over HTTP. It sets up:
- CORS middleware, configured from ``config.security``
- The single ``StarRegistry`` instance (one ledger, one writer)
- All API route endpoints

The chain lives in memory: restarting the server starts a fresh ledger with
only the genesis block.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from star_registry import __version__
from star_registry.api.routes import register_routes
from star_registry.config import config
from star_registry.core.registry import StarRegistry

logger = logging.getLogger(__name__)


def create_app(registry: StarRegistry | None = None) -> FastAPI:
    """
    Build a FastAPI app bound to ``registry``.

    Args:
        registry: Registry to serve. A new one using the configured challenge
            window is created when omitted.

    Returns:
        The configured application. The registry is available as
        ``app.state.registry``.
    """
    if registry is None:
        registry = StarRegistry(
            challenge_window_seconds=config.registry.challenge_window_seconds
        )

    docs_url = "/docs" if config.security.docs_enabled else None
    redoc_url = "/redoc" if config.security.docs_enabled else None
    app = FastAPI(
        title="Star Registry", version=__version__, docs_url=docs_url, redoc_url=redoc_url
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.security.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.registry = registry
    register_routes(app, registry)
    return app


# Module-level app for ``uvicorn star_registry.api.server:app``.
app = create_app()


def start_server(host: str | None = None, port: int | None = None) -> None:
    """
    Run the API with uvicorn (blocking).

    Args:
        host: Interface to bind. Defaults to ``config.server.host``.
        port: Port to bind. Defaults to ``config.server.port``.
    """
    import uvicorn

    host = host or config.server.host
    port = port or config.server.port
    logger.info("Starting Star Registry API on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=config.logging.level.lower())
