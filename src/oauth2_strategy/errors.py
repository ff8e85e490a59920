# Error taxonomy for the OAuth2 authorization code strategy.
# Created: 2026-10-19

from __future__ import annotations

from typing import Any

__all__ = [
    "OAuth2Error",
    "ProtocolValidationError",
    "TokenExchangeError",
    "VerificationError",
    "AuthorizationError",
    "PassthroughResponse",
    "StrategyNotFoundError",
]


class OAuth2Error(Exception):
    """Base class for failures raised inside the authorization code flow."""


class ProtocolValidationError(OAuth2Error):
    """Callback request failed a state or code check."""


class TokenExchangeError(OAuth2Error):
    """Token endpoint rejected the exchange.

    ``body`` holds the raw response text, not JSON-parsed.
    """

    def __init__(self, body: str, status_code: int | None = None):
        super().__init__(body)
        self.body = body
        self.status_code = status_code


class VerificationError(OAuth2Error):
    """The application's verify callback raised."""


class AuthorizationError(Exception):
    """Raised instead of returning a Failure when ``throw_on_error`` is set."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class PassthroughResponse(Exception):
    """Carries a ready-made response out of the flow.

    Verify callbacks and other collaborators raise this to short-circuit with
    their own response (a custom redirect, for instance). The strategy never
    converts it into a Failure.
    """

    def __init__(self, response: Any):
        super().__init__(response)
        self.response = response


class StrategyNotFoundError(KeyError):
    """No strategy is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Strategy {self.name} not found."
