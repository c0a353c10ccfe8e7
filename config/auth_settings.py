"""Explicit settings object for one login attempt"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import settings
from oauth.authorization import resolve_domain
from oauth.errors import ConfigurationError
from .loader import ConfigLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthSettings:
    """Everything the login flow needs, built once at startup

    Attributes:
        domain: Domain key (cloud, alpha, staging)
        client_id: Public OAuth client id
        scope: Space separated scopes requested at authorization
        redirect_uri_template: Redirect URI containing the default port
        port: Preferred loopback port
        timeout: Seconds to wait for the browser callback
        auth_dir: Directory holding the auth file
        env_file: Environment file updated on login/logout
        error_log_file: File receiving client-reported errors
    """
    domain: str = settings.DEFAULT_DOMAIN
    client_id: str = settings.CLIENT_ID
    scope: str = settings.SCOPES
    redirect_uri_template: str = settings.REDIRECT_URI_TEMPLATE
    port: int = settings.DEFAULT_PORT
    timeout: float = settings.AUTH_TIMEOUT
    auth_dir: Path = Path(settings.AUTH_DIR)
    env_file: Path = Path(settings.ENV_FILE)
    error_log_file: Path = Path(settings.ERROR_LOG_FILE)

    @property
    def auth_file(self) -> Path:
        return self.auth_dir / settings.AUTH_FILE_NAME

    @property
    def base_url(self) -> str:
        return settings.BASE_URLS[self.domain]

    def with_domain(self, domain: str) -> "AuthSettings":
        return replace(self, domain=validate_domain(domain))

    def with_port(self, port: int) -> "AuthSettings":
        return replace(self, port=validate_port(port))


def validate_domain(domain: Optional[str]) -> str:
    """Return the normalized domain key or raise ConfigurationError"""
    return resolve_domain(domain)


def validate_port(port: int) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigurationError(f"Invalid port: {port!r}")
    return port


def load_auth_settings(loader: Optional[ConfigLoader] = None, **overrides) -> AuthSettings:
    """Build AuthSettings from environment/.env values plus explicit overrides

    Args:
        loader: Config loader to read from (a new one is created if None)
        **overrides: Field values taking precedence over the environment
            (None values are ignored)

    Returns:
        Validated AuthSettings

    Raises:
        ConfigurationError: If the domain, port, timeout or client id is invalid
    """
    loader = loader or ConfigLoader()

    auth_dir = loader.get("UIPATH_AUTH_DIR", settings.AUTH_DIR)
    values = {
        "domain": loader.get("UIPATH_AUTH_DOMAIN", settings.DEFAULT_DOMAIN),
        "client_id": loader.get("UIPATH_CLIENT_ID", settings.CLIENT_ID),
        "scope": loader.get("UIPATH_AUTH_SCOPE", settings.SCOPES),
        "redirect_uri_template": settings.REDIRECT_URI_TEMPLATE,
        "port": loader.get("UIPATH_AUTH_PORT", settings.DEFAULT_PORT),
        "timeout": loader.get("UIPATH_AUTH_TIMEOUT", settings.AUTH_TIMEOUT),
        "auth_dir": Path(auth_dir),
        "env_file": Path(loader.get("UIPATH_ENV_FILE", settings.ENV_FILE)),
        "error_log_file": Path(settings.ERROR_LOG_FILE),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    values["domain"] = validate_domain(values["domain"])
    values["port"] = validate_port(values["port"])

    if not values["client_id"]:
        raise ConfigurationError("Missing OAuth client id")
    if values["timeout"] <= 0:
        raise ConfigurationError(f"Invalid authentication timeout: {values['timeout']!r}")

    auth_settings = AuthSettings(**values)
    logger.debug(
        f"Auth settings: domain={auth_settings.domain} port={auth_settings.port} "
        f"timeout={auth_settings.timeout}s auth_dir={auth_settings.auth_dir}"
    )
    return auth_settings
