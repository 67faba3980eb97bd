"""Framework-independent request handlers.

Each handler takes a ``HandlerRequest`` and returns a ``HandlerResult`` or
raises a ``ShortenerError``. ``LinkHandlers.routes()`` is the explicit
(method, path pattern) table; the FastAPI app in ``web_app`` and the CLI are
adapters over it.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from .common.headers import build_short_url
from .common.validators import is_valid_email, is_valid_short_code, is_valid_url
from .errors import AuthenticationFailure, NotFoundError, ValidationError
from .identity import IdentityService
from .service import URLShortenerService


@dataclass
class HandlerRequest:
    """Transport-neutral view of one request."""

    user_id: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)
    # Base URL the caller reached us on, used to build shortURL
    base_url: str = ""

    def require_user(self) -> str:
        if not self.user_id:
            raise AuthenticationFailure("You must be logged in")
        return self.user_id


@dataclass
class HandlerResult:
    """JSON body with a status code, or a redirect when ``redirect_to`` is set."""

    body: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 200
    redirect_to: Optional[str] = None


Handler = Callable[[HandlerRequest], Awaitable[HandlerResult]]


class LinkHandlers:
    """Request handlers for users and short links."""

    def __init__(
        self,
        service: URLShortenerService,
        identity: IdentityService,
        enable_custom_codes: bool = True,
        path_prefix: str = "",
        logger: Optional[logging.Logger] = None,
    ):
        self.service = service
        self.identity = identity
        self.enable_custom_codes = enable_custom_codes
        self.path_prefix = path_prefix
        self.logger = logger or logging.getLogger(__name__)

    def routes(self) -> Dict[Tuple[str, str], Handler]:
        """Static paths come before the catch-all ``/{code}``."""
        return {
            ("POST", "/users/signup"): self.signup,
            ("POST", "/users/login"): self.login,
            ("POST", "/shorten"): self.shorten,
            ("GET", "/allCodes"): self.all_codes,
            ("DELETE", "/{id}"): self.delete,
            ("GET", "/{code}"): self.redirect,
        }

    async def dispatch(self, method: str, pattern: str, request: HandlerRequest) -> HandlerResult:
        handler = self.routes().get((method.upper(), pattern))
        if handler is None:
            raise NotFoundError(f"No route for {method.upper()} {pattern}")
        return await handler(request)

    async def signup(self, request: HandlerRequest) -> HandlerResult:
        body = request.body
        firstname = _required_str(body, "firstname")
        email = _required_str(body, "email")
        password = _required_str(body, "password")
        lastname = body.get("lastname")

        if len(firstname) > 55 or (lastname is not None and len(lastname) > 55):
            raise ValidationError("Names must be at most 55 characters")
        is_valid, error = is_valid_email(email)
        if not is_valid:
            raise ValidationError(error)
        if len(password) < 3:
            raise ValidationError("Password must be at least 3 characters")

        user = await self.identity.signup(firstname, email, password, lastname=lastname)
        return HandlerResult(body={"data": {"userId": user.id}}, status_code=201)

    async def login(self, request: HandlerRequest) -> HandlerResult:
        email = _required_str(request.body, "email")
        password = _required_str(request.body, "password")
        token = await self.identity.authenticate(email, password)
        return HandlerResult(body={"token": token})

    async def shorten(self, request: HandlerRequest) -> HandlerResult:
        owner_id = request.require_user()
        url = _required_str(request.body, "url")
        code = request.body.get("code")

        is_valid, error = is_valid_url(url)
        if not is_valid:
            raise ValidationError(f"Invalid URL: {error}")

        if code is not None:
            if not self.enable_custom_codes:
                raise ValidationError("Custom short codes are not enabled")
            is_valid, error = is_valid_short_code(code)
            if not is_valid:
                raise ValidationError(f"Invalid short code: {error}")

        link = await self.service.create_short_url(url, owner_id, requested_code=code)
        return HandlerResult(body={
            "id": link.id,
            "code": link.code,
            "targetURL": link.target_url,
            "shortURL": self._short_url(request.base_url, link.code),
        })

    async def all_codes(self, request: HandlerRequest) -> HandlerResult:
        owner_id = request.require_user()
        links = await self.service.list_by_owner(owner_id)
        return HandlerResult(body={"codes": [link.to_dict() for link in links]})

    async def delete(self, request: HandlerRequest) -> HandlerResult:
        owner_id = request.require_user()
        link = await self.service.delete_owned(request.params.get("id", ""), owner_id)
        return HandlerResult(body={"deleted": True, "deletedCodeURL": link.target_url})

    async def redirect(self, request: HandlerRequest) -> HandlerResult:
        link = await self.service.resolve(request.params.get("code", ""))
        return HandlerResult(status_code=302, redirect_to=link.target_url)

    def _short_url(self, base_url: str, code: str) -> Optional[str]:
        if not base_url:
            return None
        return build_short_url(code, base_url, self.path_prefix)


def _required_str(body: Dict[str, Any], key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{key}' is required")
    return value
