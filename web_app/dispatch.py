"""Bridge between FastAPI requests and the framework-independent handlers."""

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from shortener.common.headers import build_base_url
from shortener.handlers import HandlerRequest, HandlerResult


def to_handler_request(
    request: Request,
    params: Optional[Dict[str, str]] = None,
    body: Optional[Dict[str, Any]] = None,
) -> HandlerRequest:
    """Build a HandlerRequest carrying the caller id set by AuthenticationMiddleware."""
    config = request.app.state.config
    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return HandlerRequest(
        user_id=getattr(request.state, "user_id", None),
        params=params or {},
        body=body or {},
        base_url=base_url,
    )


async def run_handler(
    request: Request,
    method: str,
    pattern: str,
    params: Optional[Dict[str, str]] = None,
    body: Optional[Dict[str, Any]] = None,
) -> HandlerResult:
    handlers = request.app.state.handlers
    return await handlers.dispatch(method, pattern, to_handler_request(request, params, body))


def to_response(result: HandlerResult) -> Response:
    if result.redirect_to is not None:
        return RedirectResponse(url=result.redirect_to, status_code=result.status_code)
    return JSONResponse(content=result.body, status_code=result.status_code)
