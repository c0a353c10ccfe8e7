"""
Tests for token response, JWT and callback body validation
"""

import pytest

from oauth.errors import CallbackValidationError, InvalidJWTError, TokenValidationError
from oauth.validators import (
    validate_jwt,
    validate_token_exchange_request,
    validate_token_response,
)
from tests.conftest import make_jwt

MANDATORY = {
    "access_token": "access",
    "expires_in": 3600,
    "token_type": "Bearer",
    "scope": "offline_access",
}


class TestValidateTokenResponse:
    def test_empty_object_enumerates_every_missing_field(self):
        with pytest.raises(TokenValidationError) as exc_info:
            validate_token_response({})

        error = exc_info.value
        assert error.errors == [
            "access_token: Missing or invalid access_token",
            "expires_in: Missing or invalid expires_in",
            "token_type: Missing or invalid token_type",
            "scope: Missing or invalid scope",
        ]
        assert str(error).startswith("Token validation failed: access_token: Missing")

    def test_full_object_passes_optional_fields_through(self):
        tokens = validate_token_response({**MANDATORY, "refresh_token": "refresh", "id_token": "id"})

        assert tokens.access_token == "access"
        assert tokens.expires_in == 3600
        assert tokens.refresh_token == "refresh"
        assert tokens.id_token == "id"

    def test_mandatory_only_leaves_optionals_unset(self):
        tokens = validate_token_response(dict(MANDATORY))

        assert tokens.refresh_token is None
        assert tokens.id_token is None

    def test_wrong_types_are_reported(self):
        with pytest.raises(TokenValidationError) as exc_info:
            validate_token_response({**MANDATORY, "expires_in": "3600", "scope": 7})

        assert exc_info.value.errors == [
            "expires_in: Missing or invalid expires_in",
            "scope: Missing or invalid scope",
        ]

    def test_boolean_expires_in_is_rejected(self):
        with pytest.raises(TokenValidationError):
            validate_token_response({**MANDATORY, "expires_in": True})

    @pytest.mark.parametrize("raw", [None, [], "token"])
    def test_non_object_is_rejected(self, raw):
        with pytest.raises(TokenValidationError):
            validate_token_response(raw)


class TestValidateJWT:
    def test_accepts_three_part_token_with_json_payload(self):
        validate_jwt(make_jwt({"sub": "user"}))

    @pytest.mark.parametrize("token,parts", [("a.b", 2), ("a.b.c.d", 4), ("abc", 1)])
    def test_rejects_wrong_segment_count(self, token, parts):
        with pytest.raises(InvalidJWTError, match=f"expected 3 parts, got {parts}"):
            validate_jwt(token)

    def test_rejects_undecodable_payload(self):
        with pytest.raises(InvalidJWTError, match="unable to decode payload"):
            validate_jwt("header.%%%%.signature")

    def test_rejects_non_json_payload(self):
        # "not json" base64url encoded
        with pytest.raises(InvalidJWTError, match="unable to decode payload"):
            validate_jwt("header.bm90IGpzb24.signature")


class TestValidateTokenExchangeRequest:
    def test_returns_code_and_state(self):
        assert validate_token_exchange_request({"code": "abc", "state": "xyz"}) == ("abc", "xyz")

    @pytest.mark.parametrize("body,message", [
        (None, "Invalid request body"),
        ("code=abc", "Invalid request body"),
        ({"state": "xyz"}, "Missing or invalid authorization code"),
        ({"code": "", "state": "xyz"}, "Missing or invalid authorization code"),
        ({"code": 5, "state": "xyz"}, "Missing or invalid authorization code"),
        ({"code": "abc"}, "Missing or invalid state parameter"),
        ({"code": "abc", "state": ["xyz"]}, "Missing or invalid state parameter"),
    ])
    def test_rejects_invalid_bodies(self, body, message):
        with pytest.raises(CallbackValidationError, match=message):
            validate_token_exchange_request(body)
