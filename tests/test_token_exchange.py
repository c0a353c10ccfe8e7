"""
Tests for the authorization code exchange
"""

from urllib.parse import parse_qs

import httpx
import pytest

from oauth.errors import TokenExchangeError, TokenValidationError
from oauth.token_exchange import exchange_code_for_tokens
from settings import CLIENT_ID

TOKEN_BODY = {
    "access_token": "access",
    "expires_in": 3600,
    "token_type": "Bearer",
    "scope": "offline_access",
    "refresh_token": "refresh",
}


def token_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestExchangeCodeForTokens:
    @pytest.mark.asyncio
    async def test_posts_form_encoded_grant(self):
        requests = []

        def handler(request: httpx.Request):
            requests.append(request)
            return httpx.Response(200, json=TOKEN_BODY)

        async with token_client(handler) as client:
            tokens = await exchange_code_for_tokens("abc", "verifier", "alpha", port=8055, client=client)

        assert len(requests) == 1
        request = requests[0]
        assert str(request.url) == "https://alpha.uipath.com/identity_/connect/token"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        assert form == {
            "grant_type": "authorization_code",
            "code": "abc",
            "redirect_uri": "http://localhost:8055/oidc/login",
            "client_id": CLIENT_ID,
            "code_verifier": "verifier",
        }
        assert tokens.access_token == "access"
        assert tokens.refresh_token == "refresh"

    @pytest.mark.asyncio
    async def test_error_status_includes_body(self):
        handler = lambda request: httpx.Response(400, text='{"error":"invalid_grant"}')

        async with token_client(handler) as client:
            with pytest.raises(TokenExchangeError) as exc_info:
                await exchange_code_for_tokens("abc", "verifier", "cloud", client=client)

        assert exc_info.value.status_code == 400
        assert "invalid_grant" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_token_body_is_rejected(self):
        async with token_client(lambda request: httpx.Response(200, json={"access_token": "a"})) as client:
            with pytest.raises(TokenValidationError):
                await exchange_code_for_tokens("abc", "verifier", "cloud", client=client)

    @pytest.mark.asyncio
    async def test_transport_error_is_wrapped(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        async with token_client(handler) as client:
            with pytest.raises(TokenExchangeError, match="timed out"):
                await exchange_code_for_tokens("abc", "verifier", "cloud", client=client)

    @pytest.mark.asyncio
    async def test_single_attempt_only(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, text="server error")

        async with token_client(handler) as client:
            with pytest.raises(TokenExchangeError):
                await exchange_code_for_tokens("abc", "verifier", "cloud", client=client)
        assert len(calls) == 1
