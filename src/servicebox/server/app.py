"""FastAPI application binding a Host to HTTP."""

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from servicebox.server.routes import health, rpc

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from servicebox.config import ServiceBoxConfig
    from servicebox.host import Host

logger = logging.getLogger(__name__)


def create_app(host: "Host", config: "ServiceBoxConfig | None" = None) -> FastAPI:
    """Create the FastAPI application serving a host.

    Args:
        host: Host whose services are exposed.
        config: Optional configuration; only the endpoint path is read here.
    """
    path = config.server.path if config else "/"

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> "AsyncIterator[None]":
        logger.info(
            "Serving namespaces: %s", ", ".join(host.namespaces) or "(none)"
        )
        yield
        logger.info("Shutting down servicebox server")

    app = FastAPI(
        title="servicebox",
        description="Typed batch JSON-RPC host",
        lifespan=lifespan,
    )
    app.state.host = host
    app.state.config = config

    app.include_router(health.router, tags=["health"])
    app.include_router(rpc.create_router(host, path), tags=["rpc"])
    return app
