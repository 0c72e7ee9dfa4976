"""Rewrite routes.

GET /rewrite?url=... answers the way a proxy rewrite would: a 302 to the
cached master URL, or 204 when the request should go through unmodified.
POST /rewrite returns the host response payload as JSON instead, for proxy
scripts that forward the decision themselves.
"""

from typing import Any

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from hookbox.video.rewrite import VideoRewriter

router = APIRouter()


class RewriteRequest(BaseModel):
    url: str


def _get_rewriter(request: Request) -> VideoRewriter:
    return request.app.state.rewriter


@router.get("/rewrite")
async def rewrite_redirect(
    request: Request,
    url: str = Query(..., description="Intercepted request URL"),
) -> Response:
    result = await _get_rewriter(request).handle(url)
    if result.is_redirect and result.location:
        return RedirectResponse(result.location, status_code=result.status or 302)
    return Response(status_code=204)


@router.post("/rewrite")
async def rewrite_payload(request: Request, body: RewriteRequest) -> dict[str, Any]:
    result = await _get_rewriter(request).handle(body.url)
    return result.to_response()


@router.get("/cache")
async def list_cache(request: Request) -> dict[str, Any]:
    cache = _get_rewriter(request).cache
    entries = cache.entries()
    return {
        "max_entries": cache.max_entries,
        "size": len(entries),
        "entries": [entry.to_dict() for entry in entries],
    }
