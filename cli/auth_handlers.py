"""Authentication handlers for CLI"""

import logging

from rich.prompt import Confirm

from oauth.flow import AuthOrchestrator, format_expiry
from oauth.models import StoredAuth
from utils.storage import TokenStore

logger = logging.getLogger(__name__)


def show_existing_login(auth: StoredAuth, console) -> None:
    console.print("[green]✓ Already authenticated[/green]")
    console.print(f"[dim]Organization: {auth.organization_name or auth.organization_id}[/dim]")
    console.print(f"[dim]Tenant: {auth.tenant_name or 'Not selected'}[/dim]")
    console.print(f"[dim]Domain: {auth.domain}[/dim]")
    console.print(f"[dim]Token expires at: {format_expiry(auth.expires_at)}[/dim]")


async def handle_login(orchestrator: AuthOrchestrator, console, force: bool = False) -> bool:
    """
    Log in unless a valid login exists and the user declines to replace it

    Args:
        orchestrator: Configured AuthOrchestrator
        console: Rich console for output
        force: Skip the existing-login check

    Returns:
        True if the user ends up logged in
    """
    if not force:
        existing = orchestrator.get_existing_auth()
        if existing:
            show_existing_login(existing, console)
            if not Confirm.ask("Do you want to re-authenticate?", default=False, console=console):
                logger.debug("Keeping existing login")
                return True

    return await orchestrator.authenticate()


def handle_logout(store: TokenStore, console) -> bool:
    """
    Remove stored credentials

    Args:
        store: TokenStore instance
        console: Rich console for output

    Returns:
        True if logout succeeded
    """
    console.print("Logging out...")
    try:
        store.clear()
    except OSError as e:
        console.print(f"[red]ERROR:[/red] Logout failed: {e}")
        return False

    console.print("[green][OK][/green] Successfully logged out")
    console.print("[dim]Credentials removed from the auth file and environment file[/dim]")
    return True
