"""PKCE (Proof Key for Code Exchange) generation"""

import base64
import hashlib
import secrets
from typing import NamedTuple

from settings import RANDOM_BYTES_LENGTH


class PKCEChallenge(NamedTuple):
    """PKCE material for one login attempt (never persisted)"""
    code_verifier: str
    code_challenge: str
    state: str


def base64url_encode(data: bytes) -> str:
    """Base64url encode without padding"""
    return base64.urlsafe_b64encode(data).decode('utf-8').rstrip('=')


def generate_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge for a verifier"""
    challenge_bytes = hashlib.sha256(code_verifier.encode('utf-8')).digest()
    return base64url_encode(challenge_bytes)


def generate_pkce_challenge() -> PKCEChallenge:
    """Generate a code verifier, its S256 challenge, and an anti-forgery state

    Returns:
        PKCEChallenge with 43 character verifier and state
    """
    # 32 random bytes -> 43 url-safe characters
    code_verifier = base64url_encode(secrets.token_bytes(RANDOM_BYTES_LENGTH))
    state = base64url_encode(secrets.token_bytes(RANDOM_BYTES_LENGTH))

    return PKCEChallenge(
        code_verifier=code_verifier,
        code_challenge=generate_code_challenge(code_verifier),
        state=state,
    )
