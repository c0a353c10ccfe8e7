"""OAuth Authorization Code + PKCE package for the UiPath CLI

The interactive orchestrator lives in oauth.flow and is imported from
there explicitly, since it depends on config, portal and utils.
"""

from .errors import (
    AuthCancelledError,
    AuthError,
    AuthServerError,
    AuthTimeoutError,
    CallbackValidationError,
    ConfigurationError,
    InvalidJWTError,
    MissingOrganizationError,
    NoAvailablePortError,
    PortalRequestError,
    PortalUnauthorizedError,
    PortInUseError,
    StateMismatchError,
    TenantSelectionError,
    TokenExchangeError,
    TokenValidationError,
)
from .models import AccessTokenClaims, SelectedTenant, StoredAuth, TokenResponse
from .pkce import PKCEChallenge, generate_pkce_challenge
from .authorization import (
    AuthorizationRequest,
    build_redirect_uri,
    get_authorization_url,
    get_base_url,
    resolve_domain,
)
from .jwt_utils import first_present, parse_jwt
from .validators import validate_jwt, validate_token_exchange_request, validate_token_response
from .token_exchange import exchange_code_for_tokens
from .completion import OneShot
from .callback_server import AuthServer, ServerState

__all__ = [
    "AuthCancelledError",
    "AuthError",
    "AuthServerError",
    "AuthTimeoutError",
    "CallbackValidationError",
    "ConfigurationError",
    "InvalidJWTError",
    "MissingOrganizationError",
    "NoAvailablePortError",
    "PortalRequestError",
    "PortalUnauthorizedError",
    "PortInUseError",
    "StateMismatchError",
    "TenantSelectionError",
    "TokenExchangeError",
    "TokenValidationError",
    "AccessTokenClaims",
    "SelectedTenant",
    "StoredAuth",
    "TokenResponse",
    "PKCEChallenge",
    "generate_pkce_challenge",
    "AuthorizationRequest",
    "build_redirect_uri",
    "get_authorization_url",
    "get_base_url",
    "resolve_domain",
    "first_present",
    "parse_jwt",
    "validate_jwt",
    "validate_token_exchange_request",
    "validate_token_response",
    "exchange_code_for_tokens",
    "OneShot",
    "AuthServer",
    "ServerState",
]
