# Strategy configuration: validated, immutable, optionally loaded from env.
# Created: 2026-10-19

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["StrategyConfig", "OAuth2Settings"]


def _is_absolute_http_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class StrategyConfig(BaseModel):
    """Provider endpoints and client credentials for one OAuth2 provider.

    ``callback_url`` may be an absolute URL, a root-relative path
    (``/auth/callback``) or a bare host-relative value
    (``app.example.com/auth/callback``). The latter two are resolved against
    the inbound request's host.
    """

    model_config = ConfigDict(frozen=True)

    authorization_url: str
    token_url: str
    client_id: str
    client_secret: str
    callback_url: str
    scope: str | None = None
    response_type: str = "code"
    use_basic_authentication_header: bool = False
    allow_reauth: bool = False

    @field_validator("authorization_url", "token_url")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        if not _is_absolute_http_url(value):
            raise ValueError(f"must be an absolute http(s) URL, got {value!r}")
        return value

    @field_validator("callback_url")
    @classmethod
    def _check_callback(cls, value: str) -> str:
        if not value or any(ch.isspace() for ch in value):
            raise ValueError(f"invalid callback URL {value!r}")
        if value.startswith(("http:", "https:")) and not _is_absolute_http_url(value):
            raise ValueError(f"invalid callback URL {value!r}")
        return value

    @field_validator("client_id")
    @classmethod
    def _check_client_id(cls, value: str) -> str:
        if not value:
            raise ValueError("client_id must not be empty")
        return value

    @field_validator("scope", mode="before")
    @classmethod
    def _join_scopes(cls, value):
        # Providers expect a space-delimited scope string
        if isinstance(value, (list, tuple, set)):
            return " ".join(value) or None
        return value


class OAuth2Settings(BaseSettings):
    """Strategy settings read from ``OAUTH2_*`` environment variables.

    Usage:
        config = OAuth2Settings().to_config()
    """

    model_config = SettingsConfigDict(env_prefix="OAUTH2_", env_file=".env", extra="ignore")

    authorization_url: str
    token_url: str
    client_id: str
    client_secret: str
    callback_url: str
    scope: str | None = None
    response_type: str = "code"
    use_basic_authentication_header: bool = False
    allow_reauth: bool = False

    def to_config(self) -> StrategyConfig:
        return StrategyConfig(**self.model_dump())
