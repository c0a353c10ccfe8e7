"""Configuration management package for the UiPath CLI login flow"""

from .loader import ConfigLoader
from .auth_settings import AuthSettings, load_auth_settings

__all__ = [
    "ConfigLoader",
    "AuthSettings",
    "load_auth_settings",
]
