# Shared fixtures: in-memory session storage and a mocked token endpoint.
# Created: 2026-10-19

from __future__ import annotations

import json
import uuid
from typing import Any
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from oauth2_strategy import AuthRequest, StrategyConfig

TOKEN_URL = "https://provider.example.com/oauth2/token"
AUTHORIZATION_URL = "https://provider.example.com/oauth2/authorize"


class MemorySession:
    def __init__(self, sid: str, data: dict[str, Any] | None = None):
        self.id = sid
        self.data = dict(data or {})

    def get(self, key: str) -> Any:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def unset(self, key: str) -> None:
        self.data.pop(key, None)


class MemorySessionStorage:
    """Cookie holds only the session id; data lives here until committed."""

    def __init__(self):
        self.sessions: dict[str, dict[str, Any]] = {}
        self.commits = 0

    async def get_session(self, cookie: str | None) -> MemorySession:
        sid = None
        if cookie:
            for part in cookie.split(";"):
                name, _, value = part.strip().partition("=")
                if name == "sid":
                    sid = value
        if sid and sid in self.sessions:
            return MemorySession(sid, self.sessions[sid])
        return MemorySession(sid or uuid.uuid4().hex)

    async def commit_session(self, session: MemorySession) -> str:
        self.sessions[session.id] = dict(session.data)
        self.commits += 1
        return f"sid={session.id}; Path=/; HttpOnly"

    async def destroy_session(self, session: MemorySession) -> str:
        self.sessions.pop(session.id, None)
        return "sid=; Path=/; Max-Age=0"


class TokenEndpoint:
    """Records token requests and answers with a canned response."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {
            "access_token": "A",
            "refresh_token": "R",
            "token_type": "Bearer",
        }
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, content=json.dumps(self.payload).encode())

    @property
    def last_form(self) -> dict[str, str]:
        body = self.requests[-1].content.decode()
        return {k: v[0] for k, v in parse_qs(body, keep_blank_values=True).items()}


def cookie_from(headers: dict[str, str]) -> str:
    return headers["Set-Cookie"].split(";", 1)[0]


def query_of(url: str) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(urlsplit(url).query).items()}


def make_request(url: str, cookie: str | None = None, **headers: str) -> AuthRequest:
    hdrs = {k.replace("_", "-"): v for k, v in headers.items()}
    if cookie:
        hdrs["cookie"] = cookie
    return AuthRequest(url=url, headers=hdrs)


@pytest.fixture
def config():
    return StrategyConfig(
        authorization_url=AUTHORIZATION_URL,
        token_url=TOKEN_URL,
        client_id="client-123",
        client_secret="s3cret",
        callback_url="https://app.example.com/auth/callback",
        scope="read:user",
    )


@pytest.fixture
def storage():
    return MemorySessionStorage()


@pytest.fixture
def token_endpoint():
    return TokenEndpoint()


@pytest.fixture
async def http_client(token_endpoint):
    async with httpx.AsyncClient(transport=httpx.MockTransport(token_endpoint)) as client:
        yield client
