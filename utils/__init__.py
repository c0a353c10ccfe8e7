"""Shared utilities package for the UiPath CLI login flow"""

from .storage import TokenStore, calculate_expiration_time, is_token_expired
from .env_file import update_env_file
from .port_checker import find_available_port, is_port_available
from .debug_console import (
    DebugCapturingConsole,
    create_debug_console,
    setup_debug_logger,
    setup_debug_logging,
)

__all__ = [
    "TokenStore",
    "calculate_expiration_time",
    "is_token_expired",
    "update_env_file",
    "find_available_port",
    "is_port_available",
    "DebugCapturingConsole",
    "create_debug_console",
    "setup_debug_logger",
    "setup_debug_logging",
]
