"""Status display functionality for CLI"""

from rich.table import Table
from utils.storage import TokenStore


def show_token_status(store: TokenStore, console):
    """
    Display the stored login without exposing secrets

    Args:
        store: TokenStore instance
        console: Rich console for output
    """
    status = store.get_status()
    summary, detail = get_auth_status(store)

    table = Table(title="UiPath Login Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Logged In", "Yes" if status["has_tokens"] else "No")
    table.add_row("Status", f"{summary} - {detail}")
    table.add_row("Is Expired", "Yes" if status["is_expired"] else "No")

    if status["has_tokens"]:
        table.add_row("Domain", status["domain"] or "-")
        table.add_row("Organization", status["organization_name"] or status["organization_id"] or "-")
        table.add_row("Tenant", status["tenant_name"] or "Not selected")
        table.add_row("Expires At", status["expires_at"])
        table.add_row("Time Until Expiry", status["time_until_expiry"])
        table.add_row("Refresh Token", "Yes" if status["has_refresh_token"] else "No")

    table.add_row("Auth File", str(store.auth_file))
    table.add_row("Env File", str(store.env_path))

    console.print(table)


def get_auth_status(store: TokenStore) -> tuple[str, str]:
    """
    Get a one-line login status

    Args:
        store: TokenStore instance

    Returns:
        Tuple of (status, detail_message)
    """
    status = store.get_status()

    if not status["has_tokens"]:
        return "NO AUTH", "Not logged in"

    if status["is_expired"]:
        return "EXPIRED", f"Expired {status['time_until_expiry']}"

    return "VALID", f"Expires in {status['time_until_expiry']}"
