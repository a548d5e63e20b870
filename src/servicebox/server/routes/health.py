"""Health check routes."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, object]:
    """Readiness check endpoint.

    Returns:
        Readiness status and the namespaces being served.
    """
    return {"status": "ready", "namespaces": request.app.state.host.namespaces}
