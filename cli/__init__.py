"""CLI package for the UiPath login flow

Provides the `uipath-auth` command: login, logout and status.
"""

from cli.main import main

__all__ = [
    "main",
]
