"""Shared fixtures for the login flow tests"""

import base64
import json
import socket

import pytest

from oauth.models import SelectedTenant, TokenResponse


def make_jwt(claims: dict) -> str:
    """Build an unsigned JWT carrying the given claims"""
    def encode(part: dict) -> str:
        raw = json.dumps(part).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")

    return f"{encode({'alg': 'RS256', 'typ': 'JWT'})}.{encode(claims)}.signature"


def get_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def free_port():
    return get_free_port()


@pytest.fixture
def access_token():
    return make_jwt({
        "sub": "user-1",
        "prt_id": "org-123",
        "client_id": "client",
        "exp": 2000000000,
        "iss": "https://cloud.uipath.com/identity_",
        "aud": "OrchestratorApiUserAccess",
        "iat": 1700000000,
        "auth_time": 1700000000,
    })


@pytest.fixture
def token_response(access_token):
    return TokenResponse(
        access_token=access_token,
        expires_in=3600,
        token_type="Bearer",
        scope="offline_access OrchestratorApiUserAccess",
        refresh_token="refresh-abc",
        id_token="id-xyz",
    )


@pytest.fixture
def selected_tenant():
    return SelectedTenant(
        tenant_id="tenant-1",
        tenant_name="DefaultTenant",
        tenant_display_name="Default Tenant",
        organization_id="org-123",
        organization_name="acme",
        organization_display_name="Acme Corp",
    )
