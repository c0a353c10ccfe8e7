"""
JWT payload decoding and claim lookup (no signature verification)
"""
import base64
import binascii
import json
from typing import Any, Dict, Iterable, Optional

from settings import JWT_PARTS_COUNT
from .errors import InvalidJWTError
from .models import AccessTokenClaims

# Ordered aliases for claims whose name differs between token issuers
ORGANIZATION_ID_CLAIMS = ("prt_id", "organization_id")


def _split(token: str) -> list:
    if not isinstance(token, str):
        raise InvalidJWTError("Invalid JWT format: token must be a string")
    parts = token.split(".")
    if len(parts) != JWT_PARTS_COUNT:
        raise InvalidJWTError(
            f"Invalid JWT format: expected {JWT_PARTS_COUNT} parts, got {len(parts)}"
        )
    return parts


def decode_jwt_payload(token: str) -> Dict[str, Any]:
    """
    Decode the payload segment of a JWT.

    Note: This is a structural check only. The signature is never verified,
    so the result must not be used for trust decisions.

    Args:
        token: JWT string

    Returns:
        Decoded payload as dictionary

    Raises:
        InvalidJWTError: If the token does not have 3 segments or the payload
            is not base64url encoded JSON
    """
    payload = _split(token)[1]

    # JWT uses base64url without padding
    padding = 4 - (len(payload) % 4)
    if padding != 4:
        payload += "=" * padding

    try:
        claims = json.loads(base64.urlsafe_b64decode(payload).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidJWTError("Invalid JWT: unable to decode payload") from e

    if not isinstance(claims, dict):
        raise InvalidJWTError("Invalid JWT: unable to decode payload")
    return claims


def first_present(claims: Dict[str, Any], aliases: Iterable[str]) -> Optional[Any]:
    """Return the value of the first alias with a non-empty value

    Args:
        claims: Mapping to search
        aliases: Keys in priority order

    Returns:
        The first truthy value found, or None
    """
    for alias in aliases:
        value = claims.get(alias)
        if value:
            return value
    return None


def parse_jwt(token: str) -> AccessTokenClaims:
    """Decode an access token into AccessTokenClaims

    Raises:
        InvalidJWTError: If the token is structurally invalid
    """
    claims = decode_jwt_payload(token)
    return AccessTokenClaims(
        sub=claims.get("sub"),
        prt_id=claims.get("prt_id"),
        client_id=claims.get("client_id"),
        exp=claims.get("exp"),
        iss=claims.get("iss"),
        aud=claims.get("aud"),
        iat=claims.get("iat"),
        auth_time=claims.get("auth_time"),
        organization_id=first_present(claims, ORGANIZATION_ID_CLAIMS),
    )
