# FastAPI / Starlette glue: request conversion and result rendering.
# Created: 2026-10-19

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse, Response

from oauth2_strategy.authenticator import Authenticator
from oauth2_strategy.errors import PassthroughResponse
from oauth2_strategy.models import AuthRequest, AuthResult, Failure, Redirect, Success

logger = logging.getLogger(__name__)


def auth_request_from(request: Request) -> AuthRequest:
    return AuthRequest(
        url=str(request.url),
        headers=dict(request.headers),
        method=request.method,
    )


def render_result(result: AuthResult) -> Response:
    """Map an authentication result onto an HTTP response."""
    if isinstance(result, Redirect):
        return RedirectResponse(result.url, status_code=302, headers=result.headers)
    if isinstance(result, Failure):
        return JSONResponse(
            status_code=401, content={"detail": result.message}, headers=result.headers
        )
    if isinstance(result, Success):
        return JSONResponse(
            content={"user": jsonable_encoder(result.user)}, headers=result.headers
        )
    raise TypeError(f"Unsupported authentication result: {result!r}")


async def authenticate_response(
    authenticator: Authenticator, name: str, request: Request, **kwargs: Any
) -> Response:
    """Run a strategy for a FastAPI request and return the response to send.

    A :class:`PassthroughResponse` raised by the verify callback is returned
    as-is.
    """
    try:
        result = await authenticator.authenticate(name, auth_request_from(request), **kwargs)
    except PassthroughResponse as e:
        logger.debug("Strategy %s short-circuited with its own response", name)
        return e.response
    return render_result(result)
