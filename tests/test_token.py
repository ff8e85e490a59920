# Tests for the token exchanger.
# Created: 2026-10-19

import base64

import httpx
import pytest
from conftest import TOKEN_URL, TokenEndpoint

from oauth2_strategy.errors import TokenExchangeError
from oauth2_strategy.token import TokenExchanger, basic_credentials, normalize_token_response

BASE_PARAMS = {
    "grant_type": "authorization_code",
    "redirect_uri": "https://app.example.com/auth/callback",
}


def _client(endpoint: TokenEndpoint) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(endpoint))


class TestNormalize:
    def test_splits_known_fields(self):
        tokens = normalize_token_response({"access_token": "A", "refresh_token": "R", "foo": "bar"})
        assert tokens.access_token == "A"
        assert tokens.refresh_token == "R"
        assert tokens.extra_params == {"foo": "bar"}

    def test_refresh_token_optional(self):
        tokens = normalize_token_response({"access_token": "A", "expires_in": 3600})
        assert tokens.refresh_token is None
        assert tokens.extra_params == {"expires_in": 3600}

    def test_missing_access_token(self):
        with pytest.raises(TokenExchangeError, match="access_token"):
            normalize_token_response({"error": "nope"})


class TestClientAuthentication:
    async def test_body_credentials_by_default(self, config, token_endpoint, http_client):
        exchanger = TokenExchanger(config, http_client)
        await exchanger.exchange_code_for_token("the-code", BASE_PARAMS)

        request = token_endpoint.requests[0]
        assert request.method == "POST"
        assert str(request.url) == TOKEN_URL
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert "authorization" not in request.headers
        form = token_endpoint.last_form
        assert form["client_id"] == "client-123"
        assert form["client_secret"] == "s3cret"
        assert form["code"] == "the-code"
        assert form["grant_type"] == "authorization_code"
        assert form["redirect_uri"] == "https://app.example.com/auth/callback"

    async def test_basic_header(self, config, token_endpoint, http_client):
        cfg = config.model_copy(update={"use_basic_authentication_header": True})
        await TokenExchanger(cfg, http_client).exchange_code_for_token("c", BASE_PARAMS)

        request = token_endpoint.requests[0]
        expected = base64.b64encode(b"client-123:s3cret").decode()
        assert request.headers["authorization"] == f"Basic {expected}"
        assert "client_id" not in token_endpoint.last_form
        assert "client_secret" not in token_endpoint.last_form

    def test_basic_credentials_format(self):
        assert basic_credentials("id", "secret") == "Basic aWQ6c2VjcmV0"


class TestExchange:
    async def test_refresh_grant_uses_refresh_token_field(
        self, config, token_endpoint, http_client
    ):
        params = {"grant_type": "refresh_token"}
        await TokenExchanger(config, http_client).exchange_code_for_token("old-refresh", params)
        form = token_endpoint.last_form
        assert form["refresh_token"] == "old-refresh"
        assert "code" not in form

    async def test_normalized_result(self, config):
        endpoint = TokenEndpoint(payload={"access_token": "A", "refresh_token": "R", "foo": "bar"})
        async with _client(endpoint) as client:
            tokens = await TokenExchanger(config, client).exchange_code_for_token("c", BASE_PARAMS)
        assert tokens.access_token == "A"
        assert tokens.refresh_token == "R"
        assert tokens.extra_params == {"foo": "bar"}

    async def test_error_status_carries_raw_body(self, config):
        endpoint = TokenEndpoint(status_code=400, text="invalid_grant")
        async with _client(endpoint) as client:
            with pytest.raises(TokenExchangeError) as exc_info:
                await TokenExchanger(config, client).exchange_code_for_token("c", BASE_PARAMS)
        assert exc_info.value.body == "invalid_grant"
        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "invalid_grant"

    async def test_non_json_success_body(self, config):
        endpoint = TokenEndpoint(status_code=200, text="access_token=A&scope=x")
        async with _client(endpoint) as client:
            with pytest.raises(TokenExchangeError):
                await TokenExchanger(config, client).exchange_code_for_token("c", BASE_PARAMS)

    async def test_transport_error(self, config):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(boom)) as client:
            with pytest.raises(TokenExchangeError, match="connection refused"):
                await TokenExchanger(config, client).exchange_code_for_token("c", BASE_PARAMS)
