import json
import logging
import os
import platform
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from oauth.authorization import get_base_url
from oauth.models import SelectedTenant, StoredAuth, TokenResponse
from settings import (
    AUTH_DIR,
    AUTH_ENV_KEYS,
    AUTH_FILE_NAME,
    ENV_ACCESS_TOKEN,
    ENV_BASE_URL,
    ENV_FILE,
    ENV_FOLDER_KEY,
    ENV_ORG_ID,
    ENV_ORG_NAME,
    ENV_TENANT_ID,
    ENV_TENANT_NAME,
)
from .env_file import atomic_write_text, update_env_file

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def calculate_expiration_time(expires_in: float, current_ms: Optional[int] = None) -> int:
    """Epoch milliseconds at which a token issued now with expires_in seconds expires"""
    if current_ms is None:
        current_ms = now_ms()
    return int(current_ms + expires_in * 1000)


def is_token_expired(auth: StoredAuth, current_ms: Optional[int] = None) -> bool:
    """Check whether a stored login has expired

    This is the literal comparison now >= expires_at with no clock skew
    margin. Callers that must not hand out a token about to expire should
    apply their own buffer.
    """
    if current_ms is None:
        current_ms = now_ms()
    return current_ms >= auth.expires_at


class TokenStore:
    """Sole writer of the auth file and the auth keys of the env file

    Args:
        auth_file: JSON file holding the StoredAuth record
        env_file: KEY=VALUE file updated with the login context
    """

    def __init__(self, auth_file: Optional[Path] = None, env_file: Optional[Path] = None):
        self.auth_path = Path(auth_file) if auth_file else Path(AUTH_DIR) / AUTH_FILE_NAME
        self.env_path = Path(env_file) if env_file else Path(ENV_FILE)

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.auth_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def save(
        self,
        tokens: TokenResponse,
        domain: str,
        tenant: SelectedTenant,
        folder_key: Optional[str] = None,
    ) -> StoredAuth:
        """Persist a completed login

        Args:
            tokens: Validated token response
            domain: Domain key the login was made against
            tenant: Selected tenant and organization
            folder_key: Optional default folder key

        Returns:
            The StoredAuth record that was written

        Raises:
            OSError: If either file cannot be written
        """
        auth = StoredAuth(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_at=calculate_expiration_time(tokens.expires_in),
            token_type=tokens.token_type,
            scope=tokens.scope,
            id_token=tokens.id_token,
            organization_id=tenant.organization_id,
            domain=domain,
            tenant_id=tenant.tenant_id,
            tenant_name=tenant.tenant_name,
            organization_name=tenant.organization_name,
        )

        self._ensure_secure_directory()
        atomic_write_text(self.auth_path, json.dumps(auth.to_json_dict(), indent=2))
        # Set file permissions to 600 on Unix-like systems
        if platform.system() != "Windows":
            os.chmod(self.auth_path, 0o600)
        logger.debug(f"Saved auth data to {self.auth_path}")

        env_vars = {
            ENV_ACCESS_TOKEN: tokens.access_token,
            ENV_BASE_URL: get_base_url(domain),
            ENV_TENANT_ID: tenant.tenant_id,
            ENV_ORG_ID: tenant.organization_id,
            ENV_TENANT_NAME: tenant.tenant_name,
            ENV_ORG_NAME: tenant.organization_name,
        }
        if folder_key:
            env_vars[ENV_FOLDER_KEY] = folder_key
        update_env_file(self.env_path, env_vars)

        return auth

    def load(self) -> Optional[StoredAuth]:
        """Load the stored login; None if absent or unreadable"""
        if not self.auth_path.exists():
            return None

        try:
            data = json.loads(self.auth_path.read_text(encoding="utf-8"))
            return StoredAuth.from_json_dict(data)
        except (ValueError, OSError, KeyError, TypeError) as e:
            logger.error(f"Error loading auth tokens from {self.auth_path}: {e}")
            return None

    def clear(self) -> None:
        """Remove the auth file and blank the auth keys of the env file"""
        try:
            if self.auth_path.exists():
                self.auth_path.unlink()
            update_env_file(self.env_path, {key: "" for key in AUTH_ENV_KEYS})
        except OSError as e:
            logger.error(f"Error clearing auth tokens: {e}")
            raise

    def get_status(self, current_ms: Optional[int] = None) -> Dict[str, Any]:
        """Get login status without exposing secrets"""
        auth = self.load()
        if not auth:
            return {
                "has_tokens": False,
                "is_expired": True,
                "expires_at": None,
                "time_until_expiry": "No tokens",
            }

        if current_ms is None:
            current_ms = now_ms()
        expires_str = datetime.fromtimestamp(auth.expires_at / 1000).isoformat(timespec="seconds")
        status = {
            "has_tokens": True,
            "is_expired": is_token_expired(auth, current_ms),
            "expires_at": expires_str,
            "domain": auth.domain,
            "organization_name": auth.organization_name,
            "organization_id": auth.organization_id,
            "tenant_name": auth.tenant_name,
            "tenant_id": auth.tenant_id,
            "has_refresh_token": bool(auth.refresh_token),
        }

        if status["is_expired"]:
            time_since = (current_ms - auth.expires_at) // 1000
            hours_since = time_since // 3600
            mins_since = (time_since % 3600) // 60
            if hours_since > 0:
                status["time_until_expiry"] = f"{hours_since}h {mins_since}m ago"
            else:
                status["time_until_expiry"] = f"{mins_since}m ago"
            return status

        time_remaining = (auth.expires_at - current_ms) // 1000
        hours = time_remaining // 3600
        minutes = (time_remaining % 3600) // 60
        if hours > 0:
            status["time_until_expiry"] = f"{hours}h {minutes}m"
        else:
            status["time_until_expiry"] = f"{minutes}m"
        status["expires_in_seconds"] = time_remaining
        return status

    @property
    def auth_file(self) -> Path:
        """Get the auth file path"""
        return self.auth_path
