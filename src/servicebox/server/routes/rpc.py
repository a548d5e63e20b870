"""Batch RPC routes."""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from servicebox.host import Host


def create_router(host: Host, path: str = "/") -> APIRouter:
    """Routes for one host: POST runs a batch, GET returns metadata."""
    router = APIRouter()

    @router.post(path)
    async def execute_batch(request: Request) -> Response:
        response = await host.handle(request)
        return Response(
            content=response.body,
            status_code=response.status_code,
            headers=response.headers,
        )

    @router.get(path)
    async def describe() -> JSONResponse:
        return JSONResponse(host.describe())

    return router
