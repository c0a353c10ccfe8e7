"""Structural validation of token responses and callback payloads"""

from typing import Any, Tuple

from .errors import CallbackValidationError, TokenValidationError
from .jwt_utils import decode_jwt_payload
from .models import TokenResponse

# Mandatory token response fields and their accepted types
REQUIRED_TOKEN_FIELDS = (
    ("access_token", str),
    ("expires_in", (int, float)),
    ("token_type", str),
    ("scope", str),
)


def _is_valid(value: Any, expected_type) -> bool:
    # bool is an int subclass but never a valid expires_in
    if isinstance(value, bool):
        return False
    return bool(value) and isinstance(value, expected_type)


def validate_token_response(data: Any) -> TokenResponse:
    """Validate a token endpoint JSON response

    Every missing or mistyped mandatory field is reported in one error.

    Args:
        data: Parsed JSON body

    Returns:
        TokenResponse with optional fields passed through when present

    Raises:
        TokenValidationError: If data is not an object or fields are invalid
    """
    if not isinstance(data, dict):
        raise TokenValidationError(["Invalid token response: expected object"])

    errors = [
        f"{name}: Missing or invalid {name}"
        for name, expected_type in REQUIRED_TOKEN_FIELDS
        if not _is_valid(data.get(name), expected_type)
    ]
    if errors:
        raise TokenValidationError(errors)

    refresh_token = data.get("refresh_token")
    id_token = data.get("id_token")
    return TokenResponse(
        access_token=data["access_token"],
        expires_in=data["expires_in"],
        token_type=data["token_type"],
        scope=data["scope"],
        refresh_token=refresh_token if isinstance(refresh_token, str) else None,
        id_token=id_token if isinstance(id_token, str) else None,
    )


def validate_jwt(token: str) -> None:
    """Check a token has 3 segments and a decodable JSON payload

    Raises:
        InvalidJWTError: If the token is structurally invalid
    """
    decode_jwt_payload(token)


def validate_token_exchange_request(body: Any) -> Tuple[str, str]:
    """Validate the JSON body posted by the callback page

    Returns:
        Tuple of (code, state)

    Raises:
        CallbackValidationError: If the body is not an object or code/state
            is missing, empty or not a string
    """
    if not isinstance(body, dict):
        raise CallbackValidationError("Invalid request body")

    code = body.get("code")
    if not code or not isinstance(code, str):
        raise CallbackValidationError("Missing or invalid authorization code")

    state = body.get("state")
    if not state or not isinstance(state, str):
        raise CallbackValidationError("Missing or invalid state parameter")

    return code, state
