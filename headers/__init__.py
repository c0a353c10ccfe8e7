"""HTTP headers and constants package for UiPath API calls"""

from .builder import create_headers
from .constants import (
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    USER_AGENT,
)

__all__ = [
    "create_headers",
    "CONTENT_TYPE_FORM",
    "CONTENT_TYPE_JSON",
    "USER_AGENT",
]
