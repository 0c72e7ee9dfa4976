"""Health check routes."""

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, str]:
    """Readiness check: the rewriter has been wired into app state."""
    if getattr(request.app.state, "rewriter", None) is None:
        return {"status": "starting"}
    return {"status": "ready"}
