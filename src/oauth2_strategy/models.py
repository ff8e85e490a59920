# Data models for the authorization code flow.
# Created: 2026-10-19

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union
from urllib.parse import parse_qsl, urlsplit

import httpx

__all__ = [
    "AuthRequest",
    "TokenResponse",
    "VerifyPayload",
    "AuthenticateOptions",
    "Success",
    "Failure",
    "Redirect",
    "AuthResult",
]


@dataclass
class AuthRequest:
    """The parts of an inbound HTTP request the flow reads.

    Only the URL, headers and query string matter; the method is kept for
    adapters that want it.
    """

    url: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    method: str = "GET"

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            self.headers = httpx.Headers(self.headers or {})

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def host(self) -> str:
        return urlsplit(self.url).netloc

    @property
    def query(self) -> dict[str, str]:
        # First value wins for repeated keys
        params: dict[str, str] = {}
        for key, value in parse_qsl(urlsplit(self.url).query, keep_blank_values=True):
            params.setdefault(key, value)
        return params

    @property
    def cookie(self) -> str | None:
        return self.headers.get("cookie")


@dataclass
class TokenResponse:
    """Normalized token endpoint response."""

    access_token: str
    refresh_token: str | None = None
    extra_params: dict[str, Any] = field(default_factory=dict)


@dataclass
class VerifyPayload:
    """Everything handed to the application's verify callback."""

    access_token: str
    refresh_token: str | None
    extra_params: dict[str, Any]
    profile: Any
    request: AuthRequest
    context: Any = None


@dataclass
class AuthenticateOptions:
    """Per-call options shared by every strategy."""

    session_key: str = "user"
    session_error_key: str = "auth:error"
    success_redirect: str | None = None
    failure_redirect: str | None = None
    throw_on_error: bool = False
    context: Any = None


@dataclass
class Success:
    user: Any
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class Failure:
    message: str
    cause: BaseException
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class Redirect:
    url: str
    headers: dict[str, str] = field(default_factory=dict)


AuthResult = Union[Success, Failure, Redirect]
