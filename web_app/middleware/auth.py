"""Bearer token middleware."""

import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Callable

from shortener.common.headers import parse_authorization_header
from shortener.errors import ShortenerError


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Resolve the Authorization header into ``request.state.user_id``.

    No header leaves the request anonymous; whether a route needs a caller is
    decided by its handler.
    """

    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortener.web.auth")

    async def dispatch(self, request: Request, call_next: Callable):
        request.state.user_id = None

        try:
            token = parse_authorization_header(request.headers.get("authorization"))
            if token is not None:
                identity = request.app.state.identity
                request.state.user_id = await identity.current_user(token)
        except ShortenerError as e:
            # Exception handlers don't cover middleware, so render here
            self.logger.info(f"Rejected credentials on {request.method} {request.url.path}: {e.message}")
            return JSONResponse(status_code=e.status_code, content={"error": e.message})

        return await call_next(request)
