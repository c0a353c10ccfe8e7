"""Token and login result types"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class TokenResponse:
    """Validated token endpoint response"""
    access_token: str
    expires_in: int
    token_type: str
    scope: str
    refresh_token: Optional[str] = None
    id_token: Optional[str] = None


@dataclass
class AccessTokenClaims:
    """Decoded (unverified) access token payload, used only for routing"""
    sub: Optional[str] = None
    prt_id: Optional[str] = None
    client_id: Optional[str] = None
    exp: Optional[int] = None
    iss: Optional[str] = None
    aud: Any = None
    iat: Optional[int] = None
    auth_time: Optional[int] = None
    organization_id: Optional[str] = None


@dataclass
class SelectedTenant:
    tenant_id: str
    tenant_name: str
    tenant_display_name: str
    organization_id: str
    organization_name: str
    organization_display_name: str


# Python attribute -> JSON key in .auth.json
_STORED_AUTH_KEYS = {
    "access_token": "accessToken",
    "refresh_token": "refreshToken",
    "expires_at": "expiresAt",
    "token_type": "tokenType",
    "scope": "scope",
    "id_token": "idToken",
    "organization_id": "organizationId",
    "domain": "domain",
    "tenant_id": "tenantId",
    "tenant_name": "tenantName",
    "organization_name": "organizationName",
}


@dataclass
class StoredAuth:
    """Login record persisted to .uipath/.auth.json

    expires_at is epoch milliseconds.
    """
    access_token: str
    expires_at: int
    token_type: str
    scope: str
    domain: str
    refresh_token: Optional[str] = None
    id_token: Optional[str] = None
    organization_id: Optional[str] = None
    tenant_id: Optional[str] = None
    tenant_name: Optional[str] = None
    organization_name: Optional[str] = None

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase keys of the auth file, omitting unset optionals"""
        data = {}
        for name, value in asdict(self).items():
            if value is None:
                continue
            data[_STORED_AUTH_KEYS[name]] = value
        return data

    @classmethod
    def from_json_dict(cls, data: Dict[str, Any]) -> "StoredAuth":
        """Build from the auth file contents

        Raises:
            KeyError: If a mandatory key is missing
            TypeError: If data is not a mapping
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
        values = {}
        for field in fields(cls):
            key = _STORED_AUTH_KEYS[field.name]
            if key in data:
                values[field.name] = data[key]
        return cls(**values)
