"""Exception types raised by the login flow"""

from typing import Iterable, List


class AuthError(Exception):
    """Base class for every login failure"""


class ConfigurationError(AuthError):
    """Unsupported domain or missing client configuration"""


class PortInUseError(AuthError):
    """The callback port is bound by another process"""

    def __init__(self, port: int):
        self.port = port
        super().__init__(f"Port {port} is already in use")


class NoAvailablePortError(AuthError):
    """None of the candidate callback ports is free"""

    def __init__(self, ports: Iterable[int]):
        self.ports = list(ports)
        super().__init__(f"No available port found. Tried: {', '.join(str(p) for p in self.ports)}")


class CallbackValidationError(AuthError):
    """The browser callback body is missing code or state"""


class StateMismatchError(CallbackValidationError):
    """The callback state differs from the state sent to the provider"""

    def __init__(self):
        super().__init__("Invalid state parameter")


class TokenValidationError(AuthError):
    """Token response is missing mandatory fields or has the wrong types"""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Token validation failed: {', '.join(self.errors)}")


class InvalidJWTError(AuthError):
    """Token is not a structurally valid JWT"""


class TokenExchangeError(AuthError):
    """Token endpoint returned an error or could not be reached"""

    def __init__(self, message: str, status_code: int = None, body: str = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class PortalRequestError(AuthError):
    """Portal API request failed"""


class PortalUnauthorizedError(PortalRequestError):
    """Portal API rejected the access token"""

    def __init__(self):
        super().__init__("Unauthorized: Token may be expired")


class MissingOrganizationError(AuthError):
    """Access token carries no organization id"""

    def __init__(self):
        super().__init__("No organization ID found in token")


class TenantSelectionError(AuthError):
    """No organization or tenant could be selected"""


class AuthTimeoutError(AuthError):
    """No callback arrived before the deadline"""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__("Authentication timeout")


class AuthCancelledError(AuthError):
    """The callback server stopped before the login completed"""

    def __init__(self):
        super().__init__("Authentication cancelled")


class AuthServerError(AuthError):
    """The callback server could not start"""
