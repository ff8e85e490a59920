# Authorization and callback URL construction.
# Created: 2026-10-19

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from oauth2_strategy.config import StrategyConfig
from oauth2_strategy.models import AuthRequest

AuthorizationParamsHook = Callable[[Mapping[str, str]], Mapping[str, str]]


def default_authorization_params(query: Mapping[str, str]) -> dict[str, str]:
    """Pass the initiating request's query string through unchanged."""
    return dict(query)


def generate_state() -> str:
    return str(uuid.uuid4())


def resolve_callback_url(config: StrategyConfig, request: AuthRequest) -> str:
    """Return the absolute callback URL for this request.

    Relative callbacks are resolved against the forwarded host, the Host
    header or the request URL's own host, in that order. Hosts containing
    ``localhost`` get ``http``; everything else gets ``https``.
    """
    callback = config.callback_url
    if callback.startswith(("http:", "https:")):
        return callback

    host = (
        request.headers.get("x-forwarded-host")
        or request.headers.get("host")
        or request.host
    )
    protocol = "http" if "localhost" in host else "https"

    if callback.startswith("/"):
        return urljoin(f"{protocol}://{host}", callback)
    return f"{protocol}://{callback}"


def callback_path(config: StrategyConfig, request: AuthRequest) -> str:
    return urlsplit(resolve_callback_url(config, request)).path or "/"


def build_authorization_url(
    config: StrategyConfig,
    request: AuthRequest,
    state: str,
    authorization_params: AuthorizationParamsHook = default_authorization_params,
) -> str:
    """Build the provider URL the user is redirected to.

    The four reserved keys always override whatever the hook returned; the
    configured scope is only a default.
    """
    endpoint = urlsplit(config.authorization_url)
    params: dict[str, str] = dict(parse_qsl(endpoint.query, keep_blank_values=True))
    params.update(authorization_params(request.query))

    params["response_type"] = config.response_type
    params["client_id"] = config.client_id
    params["redirect_uri"] = resolve_callback_url(config, request)
    params["state"] = state

    if "scope" not in params and config.scope:
        params["scope"] = config.scope

    return urlunsplit(endpoint._replace(query=urlencode(params)))
