# Token exchange: authorization code (or refresh token) for an access token.
# Created: 2026-10-19

from __future__ import annotations

import base64
import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from oauth2_strategy.config import StrategyConfig
from oauth2_strategy.errors import TokenExchangeError
from oauth2_strategy.models import TokenResponse

logger = logging.getLogger(__name__)

TokenParamsHook = Callable[[], Mapping[str, str]]


def default_token_params() -> dict[str, str]:
    return {}


def basic_credentials(client_id: str, client_secret: str) -> str:
    raw = f"{client_id}:{client_secret}".encode()
    return f"Basic {base64.b64encode(raw).decode()}"


def normalize_token_response(data: Mapping[str, Any]) -> TokenResponse:
    """Split ``access_token``/``refresh_token`` out of a raw token response.

    Every other field is forwarded unchanged in ``extra_params``.
    """
    extra = dict(data)
    if "access_token" not in extra:
        raise TokenExchangeError("Token response is missing access_token")
    access_token = extra.pop("access_token")
    refresh_token = extra.pop("refresh_token", None)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        extra_params=extra,
    )


class TokenExchanger:
    """Posts to the provider's token endpoint.

    Args:
        config: Strategy configuration (token URL and client credentials).
        http_client: Optional shared ``httpx.AsyncClient``. Timeouts and
            transport policy belong to this client. Without one, a
            short-lived client is opened per exchange.
    """

    def __init__(self, config: StrategyConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self.http_client = http_client

    def build_request(
        self, code: str, params: Mapping[str, str]
    ) -> tuple[dict[str, str], dict[str, str]]:
        """Return ``(headers, form)`` for the token request."""
        form = dict(params)
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        if self.config.use_basic_authentication_header:
            headers["Authorization"] = basic_credentials(
                self.config.client_id, self.config.client_secret
            )
        else:
            form["client_id"] = self.config.client_id
            form["client_secret"] = self.config.client_secret

        if form.get("grant_type") == "refresh_token":
            form["refresh_token"] = code
        else:
            form["code"] = code
        return headers, form

    async def exchange_code_for_token(
        self, code: str, params: Mapping[str, str]
    ) -> TokenResponse:
        headers, form = self.build_request(code, params)

        try:
            if self.http_client is not None:
                resp = await self.http_client.post(
                    self.config.token_url, headers=headers, data=form
                )
            else:
                async with httpx.AsyncClient(timeout=15) as client:
                    resp = await client.post(self.config.token_url, headers=headers, data=form)
        except httpx.HTTPError as e:
            logger.warning("Token request to %s failed: %s", self.config.token_url, e)
            raise TokenExchangeError(str(e)) from e

        if not resp.is_success:
            logger.warning(
                "Token endpoint %s returned %d", self.config.token_url, resp.status_code
            )
            raise TokenExchangeError(resp.text, status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise TokenExchangeError(resp.text, status_code=resp.status_code) from e
        if not isinstance(data, dict):
            raise TokenExchangeError(resp.text, status_code=resp.status_code)

        return normalize_token_response(data)
