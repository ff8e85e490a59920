# OAuth 2.0 authorization code strategy.
# Created: 2026-10-19
#
# Two requests make up one login: the initiating request is redirected to
# the provider with a fresh state stored in the session, and the provider's
# callback is validated against that state before the code is exchanged.

from __future__ import annotations

import hmac
import inspect
import json
import logging
from collections.abc import Callable
from typing import Any

import httpx

from oauth2_strategy.config import StrategyConfig
from oauth2_strategy.errors import (
    OAuth2Error,
    PassthroughResponse,
    ProtocolValidationError,
    VerificationError,
)
from oauth2_strategy.models import (
    AuthenticateOptions,
    AuthRequest,
    AuthResult,
    Redirect,
    VerifyPayload,
)
from oauth2_strategy.profile import ProfileHook, default_user_profile
from oauth2_strategy.protocol import BaseStrategy, Session, SessionStorage
from oauth2_strategy.token import TokenExchanger, TokenParamsHook, default_token_params
from oauth2_strategy.urls import (
    AuthorizationParamsHook,
    build_authorization_url,
    callback_path,
    default_authorization_params,
    generate_state,
    resolve_callback_url,
)

logger = logging.getLogger(__name__)

STATE_SESSION_KEY = "oauth2:state"

VerifyCallback = Callable[[VerifyPayload], Any]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _describe_error(exc: Exception) -> tuple[str, OAuth2Error]:
    """Turn anything the exchange/verify steps raised into (message, cause)."""
    if isinstance(exc, OAuth2Error):
        return str(exc), exc
    if exc.args and isinstance(exc.args[0], (str, int, float, bool)):
        message = str(exc.args[0])
        cause = VerificationError(message)
    elif exc.args:
        message = "Unknown error"
        cause = VerificationError(json.dumps(exc.args[0], indent=2, default=str))
    else:
        message = str(exc) or type(exc).__name__
        cause = VerificationError(message)
    cause.__cause__ = exc
    return message, cause


class OAuth2Strategy(BaseStrategy):
    """Delegated login through an OAuth 2.0 provider.

    The ``verify`` callback receives a :class:`VerifyPayload` and returns the
    application user (find-or-create is entirely up to it). Raising from it
    fails the login; raising :class:`PassthroughResponse` hands a custom
    response back to the caller untouched.

    Provider-specific behaviour is injected rather than subclassed:

    - ``user_profile(access_token, extra_params)`` loads the profile.
    - ``authorization_params(query)`` adds non-standard authorization params.
    - ``token_params()`` adds non-standard token request params.

    Usage:
        strategy = OAuth2Strategy(
            StrategyConfig(
                authorization_url="https://provider.example/oauth2/authorize",
                token_url="https://provider.example/oauth2/token",
                client_id="123-456-789",
                client_secret="shhh",
                callback_url="/auth/example/callback",
            ),
            verify=find_or_create_user,
        )
        result = await strategy.authenticate(request, session_storage, AuthenticateOptions())
    """

    name = "oauth2"

    def __init__(
        self,
        config: StrategyConfig,
        verify: VerifyCallback,
        *,
        name: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        user_profile: ProfileHook = default_user_profile,
        authorization_params: AuthorizationParamsHook = default_authorization_params,
        token_params: TokenParamsHook = default_token_params,
    ):
        self.config = config
        self.verify = verify
        if name:
            self.name = name
        self.exchanger = TokenExchanger(config, http_client)
        self.user_profile = user_profile
        self.authorization_params = authorization_params
        self.token_params = token_params

    def get_callback_url(self, request: AuthRequest) -> str:
        return resolve_callback_url(self.config, request)

    def get_authorization_url(self, request: AuthRequest, state: str) -> str:
        return build_authorization_url(self.config, request, state, self.authorization_params)

    async def authenticate(
        self,
        request: AuthRequest,
        session_storage: SessionStorage,
        options: AuthenticateOptions,
    ) -> AuthResult:
        logger.debug("Request URL %s", request.url)
        session = await session_storage.get_session(request.cookie)

        user = session.get(options.session_key)
        if user is not None and not self.config.allow_reauth:
            logger.debug("User is already authenticated")
            return await self.success(user, request, session, session_storage, options)

        callback_url = self.get_callback_url(request)
        logger.debug("Callback URL %s", callback_url)

        if request.path != callback_path(self.config, request):
            return await self._initiate(request, session, session_storage)

        failure = await self._validate_callback(request, session, session_storage, options)
        if failure is not None:
            return failure
        code = request.query["code"]

        try:
            params = dict(self.token_params())
            params["grant_type"] = "authorization_code"
            params["redirect_uri"] = callback_url
            tokens = await self.exchanger.exchange_code_for_token(code, params)

            profile = await _maybe_await(
                self.user_profile(tokens.access_token, tokens.extra_params)
            )
            user = await _maybe_await(
                self.verify(
                    VerifyPayload(
                        access_token=tokens.access_token,
                        refresh_token=tokens.refresh_token,
                        extra_params=tokens.extra_params,
                        profile=profile,
                        request=request,
                        context=options.context,
                    )
                )
            )
        except PassthroughResponse:
            # Persist the consumed state before handing the response back
            await session_storage.commit_session(session)
            raise
        except Exception as e:
            logger.debug("Failed to verify user: %r", e)
            message, cause = _describe_error(e)
            return await self.failure(message, request, session, session_storage, options, cause)

        logger.info("%s: user authenticated", self.name)
        return await self.success(user, request, session, session_storage, options)

    async def _initiate(
        self, request: AuthRequest, session: Session, session_storage: SessionStorage
    ) -> Redirect:
        state = generate_state()
        logger.debug("Redirecting to provider with state %s", state)
        # A new initiation always replaces a pending state
        session.set(STATE_SESSION_KEY, state)
        headers = {"Set-Cookie": await session_storage.commit_session(session)}
        return Redirect(self.get_authorization_url(request, state), headers)

    async def _validate_callback(
        self,
        request: AuthRequest,
        session: Session,
        session_storage: SessionStorage,
        options: AuthenticateOptions,
    ) -> AuthResult | None:
        query = request.query

        state_url = query.get("state")
        logger.debug("State from URL %s", state_url)
        if not state_url:
            return await self._reject(
                "Missing state on URL.", request, session, session_storage, options
            )

        state_session = session.get(STATE_SESSION_KEY)
        logger.debug("State from session %s", state_session)
        if not state_session:
            return await self._reject(
                "Missing state on session.", request, session, session_storage, options
            )

        if not hmac.compare_digest(str(state_session).encode(), state_url.encode()):
            return await self._reject(
                "State doesn't match.", request, session, session_storage, options
            )
        session.unset(STATE_SESSION_KEY)
        logger.debug("State is valid")

        if not query.get("code"):
            return await self._reject("Missing code.", request, session, session_storage, options)
        return None

    async def _reject(
        self,
        message: str,
        request: AuthRequest,
        session: Session,
        session_storage: SessionStorage,
        options: AuthenticateOptions,
    ) -> AuthResult:
        return await self.failure(
            message, request, session, session_storage, options, ProtocolValidationError(message)
        )
