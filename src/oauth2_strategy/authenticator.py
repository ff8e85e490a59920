# Authenticator: strategies registered and dispatched by name.
# Created: 2026-10-19

from __future__ import annotations

import logging
from typing import Any

from oauth2_strategy.errors import StrategyNotFoundError
from oauth2_strategy.models import AuthenticateOptions, AuthRequest, AuthResult, Redirect
from oauth2_strategy.protocol import SessionStorage, StrategyProtocol

logger = logging.getLogger(__name__)


class Authenticator:
    """
    Registry of authentication strategies sharing one session storage.

    Usage:
        authenticator = Authenticator(session_storage)
        authenticator.use(OAuth2Strategy(config, verify), "github")

        result = await authenticator.authenticate(
            "github", request, success_redirect="/dashboard", failure_redirect="/login"
        )
    """

    def __init__(
        self,
        session_storage: SessionStorage,
        session_key: str = "user",
        session_error_key: str = "auth:error",
        throw_on_error: bool = False,
    ):
        self.session_storage = session_storage
        self.session_key = session_key
        self.session_error_key = session_error_key
        self.throw_on_error = throw_on_error
        self._strategies: dict[str, StrategyProtocol] = {}

    def use(self, strategy: StrategyProtocol, name: str | None = None) -> Authenticator:
        """Register a strategy under ``name`` (defaults to ``strategy.name``)."""
        key = name or strategy.name
        self._strategies[key] = strategy
        logger.debug("Registered strategy: %s", key)
        return self

    def unuse(self, name: str) -> Authenticator:
        if self._strategies.pop(name, None) is not None:
            logger.debug("Unregistered strategy: %s", name)
        return self

    def get(self, name: str) -> StrategyProtocol | None:
        return self._strategies.get(name)

    def has(self, name: str) -> bool:
        return name in self._strategies

    async def authenticate(
        self,
        name: str,
        request: AuthRequest,
        *,
        success_redirect: str | None = None,
        failure_redirect: str | None = None,
        throw_on_error: bool | None = None,
        context: Any = None,
    ) -> AuthResult:
        strategy = self._strategies.get(name)
        if strategy is None:
            raise StrategyNotFoundError(name)

        options = AuthenticateOptions(
            session_key=self.session_key,
            session_error_key=self.session_error_key,
            success_redirect=success_redirect,
            failure_redirect=failure_redirect,
            throw_on_error=self.throw_on_error if throw_on_error is None else throw_on_error,
            context=context,
        )
        return await strategy.authenticate(request, self.session_storage, options)

    async def is_authenticated(self, request: AuthRequest) -> Any:
        """Return the stored user for this request, or None."""
        session = await self.session_storage.get_session(request.cookie)
        return session.get(self.session_key)

    async def logout(self, request: AuthRequest, redirect_to: str) -> Redirect:
        session = await self.session_storage.get_session(request.cookie)
        cookie = await self.session_storage.destroy_session(session)
        return Redirect(redirect_to, {"Set-Cookie": cookie})
