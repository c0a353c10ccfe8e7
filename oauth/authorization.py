"""OAuth authorization URL construction"""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

from settings import (
    AUTHORIZE_PATH,
    BASE_URLS,
    CLIENT_ID,
    CODE_CHALLENGE_METHOD,
    DEFAULT_DOMAIN,
    DEFAULT_PORT,
    REDIRECT_URI_TEMPLATE,
    RESPONSE_TYPE,
    SCOPES,
    TOKEN_PATH,
)
from .errors import ConfigurationError
from .pkce import PKCEChallenge

logger = logging.getLogger(__name__)


def resolve_domain(domain: str) -> str:
    """Strict domain lookup

    Raises:
        ConfigurationError: If the domain is empty or unsupported
    """
    if not domain or not isinstance(domain, str):
        raise ConfigurationError("Domain must be a non-empty string")
    key = domain.strip().lower()
    if key not in BASE_URLS:
        raise ConfigurationError(
            f"Unsupported domain '{domain}'. Supported domains: {', '.join(sorted(BASE_URLS))}"
        )
    return key


def get_base_url(domain: str) -> str:
    """Return the identity base URL for a domain

    Unknown domains fall back to the cloud base URL. The fallback is logged
    as a warning so it never happens silently; use resolve_domain() first
    when an unknown domain must be an error.
    """
    base_url = BASE_URLS.get((domain or "").strip().lower())
    if base_url is None:
        logger.warning(f"Unknown domain '{domain}', falling back to '{DEFAULT_DOMAIN}'")
        base_url = BASE_URLS[DEFAULT_DOMAIN]
    return base_url


def get_token_endpoint_url(domain: str) -> str:
    return f"{get_base_url(domain)}{TOKEN_PATH}"


def build_redirect_uri(
    template: str = REDIRECT_URI_TEMPLATE,
    default_port: int = DEFAULT_PORT,
    port: int = DEFAULT_PORT,
) -> str:
    """Replace the default port inside the redirect URI template with the bound port"""
    return template.replace(f":{default_port}", f":{port}", 1)


@dataclass(frozen=True)
class AuthorizationRequest:
    """Everything needed to build one authorize URL"""
    domain: str
    client_id: str
    redirect_uri: str
    scope: str
    code_challenge: str
    state: str

    def to_params(self) -> dict:
        return {
            "response_type": RESPONSE_TYPE,
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "code_challenge": self.code_challenge,
            "code_challenge_method": CODE_CHALLENGE_METHOD,
            "state": self.state,
        }

    def to_url(self) -> str:
        return f"{get_base_url(self.domain)}{AUTHORIZE_PATH}?{urlencode(self.to_params())}"


def get_authorization_url(
    domain: str,
    pkce: PKCEChallenge,
    port: int = DEFAULT_PORT,
    client_id: str = CLIENT_ID,
    scope: str = SCOPES,
    redirect_uri_template: str = REDIRECT_URI_TEMPLATE,
) -> str:
    """Construct the authorize URL for an Authorization Code + PKCE login

    Args:
        domain: Domain key (cloud, alpha, staging)
        pkce: PKCE material for this attempt
        port: Port the callback server is bound to
        client_id: OAuth client id
        scope: Space separated scopes
        redirect_uri_template: Redirect URI containing the default port

    Returns:
        Full authorization URL
    """
    request = AuthorizationRequest(
        domain=domain,
        client_id=client_id,
        redirect_uri=build_redirect_uri(redirect_uri_template, DEFAULT_PORT, port),
        scope=scope,
        code_challenge=pkce.code_challenge,
        state=pkce.state,
    )
    return request.to_url()
