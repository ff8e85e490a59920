# Strategy and session protocols, plus the shared success/failure outcomes.
# Created: 2026-10-19

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Protocol

from oauth2_strategy.errors import AuthorizationError
from oauth2_strategy.models import (
    AuthenticateOptions,
    AuthRequest,
    AuthResult,
    Failure,
    Redirect,
    Success,
)

logger = logging.getLogger(__name__)


class Session(Protocol):
    """Key-value state scoped to one browser session."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def unset(self, key: str) -> None: ...


class SessionStorage(Protocol):
    """Loads and persists sessions keyed by the request's Cookie header."""

    async def get_session(self, cookie: str | None) -> Session: ...

    async def commit_session(self, session: Session) -> str:
        """Persist the session and return a Set-Cookie header value."""
        ...

    async def destroy_session(self, session: Session) -> str:
        """Drop the session and return a Set-Cookie header value."""
        ...


class StrategyProtocol(Protocol):
    """Anything the Authenticator can dispatch to by name."""

    @property
    def name(self) -> str: ...

    async def authenticate(
        self,
        request: AuthRequest,
        session_storage: SessionStorage,
        options: AuthenticateOptions,
    ) -> AuthResult: ...


class BaseStrategy(ABC):
    """Base class for strategies with the common outcome handling.

    Subclasses implement ``authenticate`` and finish every path through
    ``success`` or ``failure`` so the session is committed before returning.
    """

    name: str = "strategy"

    @abstractmethod
    async def authenticate(
        self,
        request: AuthRequest,
        session_storage: SessionStorage,
        options: AuthenticateOptions,
    ) -> AuthResult: ...

    async def success(
        self,
        user: Any,
        request: AuthRequest,
        session: Session,
        session_storage: SessionStorage,
        options: AuthenticateOptions,
    ) -> Success | Redirect:
        session.set(options.session_key, user)
        headers = {"Set-Cookie": await session_storage.commit_session(session)}
        if options.success_redirect:
            return Redirect(options.success_redirect, headers)
        return Success(user, headers)

    async def failure(
        self,
        message: str,
        request: AuthRequest,
        session: Session,
        session_storage: SessionStorage,
        options: AuthenticateOptions,
        cause: BaseException,
    ) -> Failure | Redirect:
        logger.warning("%s authentication failed: %s", self.name, message)
        if options.throw_on_error:
            # Persist the consumed state before unwinding
            await session_storage.commit_session(session)
            raise AuthorizationError(message, cause) from cause
        if options.failure_redirect:
            session.set(options.session_error_key, {"message": message})
            headers = {"Set-Cookie": await session_storage.commit_session(session)}
            return Redirect(options.failure_redirect, headers)
        headers = {"Set-Cookie": await session_storage.commit_session(session)}
        return Failure(message, cause, headers)
