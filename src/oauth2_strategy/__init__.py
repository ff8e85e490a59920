"""OAuth 2.0 authorization code strategy.

Drives a user through redirect-based delegated login and exchanges the
authorization code for an access token. The application's verify callback
turns the token and profile into its own user.
"""

from oauth2_strategy.authenticator import Authenticator
from oauth2_strategy.config import OAuth2Settings, StrategyConfig
from oauth2_strategy.errors import (
    AuthorizationError,
    OAuth2Error,
    PassthroughResponse,
    ProtocolValidationError,
    StrategyNotFoundError,
    TokenExchangeError,
    VerificationError,
)
from oauth2_strategy.models import (
    AuthenticateOptions,
    AuthRequest,
    AuthResult,
    Failure,
    Redirect,
    Success,
    TokenResponse,
    VerifyPayload,
)
from oauth2_strategy.protocol import BaseStrategy, Session, SessionStorage, StrategyProtocol
from oauth2_strategy.strategy import STATE_SESSION_KEY, OAuth2Strategy

__all__ = [
    "Authenticator",
    "OAuth2Settings",
    "StrategyConfig",
    "AuthorizationError",
    "OAuth2Error",
    "PassthroughResponse",
    "ProtocolValidationError",
    "StrategyNotFoundError",
    "TokenExchangeError",
    "VerificationError",
    "AuthenticateOptions",
    "AuthRequest",
    "AuthResult",
    "Failure",
    "Redirect",
    "Success",
    "TokenResponse",
    "VerifyPayload",
    "BaseStrategy",
    "Session",
    "SessionStorage",
    "StrategyProtocol",
    "STATE_SESSION_KEY",
    "OAuth2Strategy",
]
