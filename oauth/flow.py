"""Interactive Authorization Code + PKCE login for the CLI"""

import logging
import webbrowser
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

import httpx
from rich.console import Console

from config.auth_settings import AuthSettings
from portal.folders import select_folder
from portal.prompts import ChoicePrompt, make_choice_prompt
from portal.tenants import resolve_tenant
from settings import ALTERNATIVE_PORTS
from utils.port_checker import is_port_available
from utils.storage import TokenStore, is_token_expired
from .authorization import get_authorization_url
from .callback_server import AuthServer, ExchangeFunc
from .errors import (
    AuthCancelledError,
    AuthError,
    AuthServerError,
    AuthTimeoutError,
    CallbackValidationError,
    ConfigurationError,
    InvalidJWTError,
    MissingOrganizationError,
    NoAvailablePortError,
    PortalRequestError,
    PortalUnauthorizedError,
    PortInUseError,
    TenantSelectionError,
    TokenExchangeError,
    TokenValidationError,
)
from .models import SelectedTenant, StoredAuth
from .pkce import generate_pkce_challenge

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    auth: StoredAuth
    tenant: SelectedTenant
    folder_key: Optional[str] = None
    port: Optional[int] = None


def format_expiry(expires_at_ms: int) -> str:
    return datetime.fromtimestamp(expires_at_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


class AuthOrchestrator:
    """Runs one login: port, PKCE, browser, callback, tenant, folder, persistence

    Args:
        settings: Explicit configuration for this login
        store: Token store (defaults to one built from settings)
        console: Console for user-facing messages
        open_browser: Callable opening a URL, returns False if it could not
        prompt: Choice prompt for tenant and folder selection
        select_folders: Whether to offer a default folder after login
        exchange: Override for the code exchange (tests)
        http_client: Shared httpx client for portal calls
        port_candidates: Ports tried in order (defaults to the configured
            port followed by the registered alternatives)
    """

    def __init__(
        self,
        settings: AuthSettings,
        store: Optional[TokenStore] = None,
        console: Optional[Console] = None,
        open_browser: Callable[[str], bool] = webbrowser.open,
        prompt: Optional[ChoicePrompt] = None,
        select_folders: bool = True,
        exchange: Optional[ExchangeFunc] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        port_candidates: Optional[List[int]] = None,
        server_host: str = "localhost",
    ):
        self.settings = settings
        self.store = store or TokenStore(settings.auth_file, settings.env_file)
        self.console = console or Console()
        self.open_browser = open_browser
        self.prompt = prompt or make_choice_prompt(self.console)
        self.select_folders = select_folders
        self.http_client = http_client
        self.server_host = server_host
        self._exchange = exchange

        if port_candidates is None:
            port_candidates = [settings.port] + [p for p in ALTERNATIVE_PORTS if p != settings.port]
        self.port_candidates = port_candidates
        self.server: Optional[AuthServer] = None

    def get_existing_auth(self) -> Optional[StoredAuth]:
        """Return the stored login if it has not expired"""
        auth = self.store.load()
        if auth and not is_token_expired(auth):
            return auth
        return None

    async def _start_server(self, code_verifier: str, state: str) -> AuthServer:
        """Start the callback server on the first free candidate port

        Raises:
            NoAvailablePortError: If every candidate is taken
        """
        for port in self.port_candidates:
            if not await is_port_available(port):
                logger.debug(f"Port {port} is busy")
                continue

            server = AuthServer(
                port=port,
                domain=self.settings.domain,
                code_verifier=code_verifier,
                expected_state=state,
                timeout=self.settings.timeout,
                client_id=self.settings.client_id,
                redirect_uri_template=self.settings.redirect_uri_template,
                error_log_file=self.settings.error_log_file,
                exchange=self._exchange,
                host=self.server_host,
            )
            try:
                await server.start()
            except PortInUseError:
                # Lost the race between probe and bind
                continue
            return server

        raise NoAvailablePortError(self.port_candidates)

    async def login(self) -> LoginResult:
        """Run the whole login and persist the result

        Returns:
            LoginResult with the stored record and selected tenant

        Raises:
            AuthError: Any login failure, by category
            OSError: If the credentials cannot be written
        """
        domain = self.settings.domain
        pkce = generate_pkce_challenge()

        self.console.print("\n[bold]Step 1:[/bold] Starting local authentication server...")
        server = await self._start_server(pkce.code_verifier, pkce.state)
        self.server = server
        self.console.print(f"[green][OK][/green] Using port {server.port}")

        try:
            auth_url = get_authorization_url(
                domain,
                pkce,
                port=server.port,
                client_id=self.settings.client_id,
                scope=self.settings.scope,
                redirect_uri_template=self.settings.redirect_uri_template,
            )

            self.console.print("\n[bold]Step 2:[/bold] Opening browser for authentication...")
            if self.open_browser(auth_url):
                self.console.print("[green][OK][/green] Browser opened successfully")
            else:
                self.console.print("[yellow]Could not open browser automatically[/yellow]")
            self.console.print("[dim]If the browser did not open, visit this URL:[/dim]")
            self.console.print(auth_url, markup=False, soft_wrap=True)

            self.console.print("\n[bold]Step 3:[/bold] Waiting for authentication in your browser...")
            tokens = await server.wait()
            self.console.print("[green][OK][/green] Successfully authenticated")
        finally:
            await server.stop()

        self.console.print("\n[bold]Step 4:[/bold] Fetching organization and tenants...")
        tenant = await resolve_tenant(tokens.access_token, domain, prompt=self.prompt, client=self.http_client)

        folder_key = None
        if self.select_folders:
            folder_key = await select_folder(
                tokens.access_token,
                domain,
                tenant.organization_name,
                tenant.tenant_name,
                prompt=self.prompt,
                client=self.http_client,
            )

        auth = self.store.save(tokens, domain, tenant, folder_key)
        logger.info(f"Saved login for organization {tenant.organization_name}, tenant {tenant.tenant_name}")
        return LoginResult(auth=auth, tenant=tenant, folder_key=folder_key, port=server.port)

    def show_success(self, result: LoginResult) -> None:
        tenant = result.tenant
        self.console.print("\n[green]✓ Successfully authenticated[/green]")
        self.console.print(f"[dim]Organization: {tenant.organization_display_name} ({tenant.organization_name})[/dim]")
        self.console.print(f"[dim]Tenant: {tenant.tenant_display_name} ({tenant.tenant_name})[/dim]")
        if result.folder_key:
            self.console.print(f"[dim]Folder Key: {result.folder_key}[/dim]")
        self.console.print(f"[dim]Domain: {result.auth.domain}[/dim]")
        self.console.print(f"[dim]Token expires at: {format_expiry(result.auth.expires_at)}[/dim]")
        self.console.print(f"\n[dim]Credentials saved to {self.store.auth_file} and {self.store.env_path}[/dim]")

    def _report_port_conflict(self, ports: List[int]) -> None:
        self.console.print(f"[red]ERROR:[/red] All registered ports ({', '.join(map(str, ports))}) are currently in use")
        self.console.print("[dim]Free one of them and try again:[/dim]")
        for port in ports:
            self.console.print(
                f"[dim]  - Port {port}: [cyan]lsof -i :{port}[/cyan] (macOS/Linux) "
                f"or [cyan]netstat -ano | findstr :{port}[/cyan] (Windows)[/dim]"
            )

    def report_error(self, error: BaseException) -> None:
        """Print one user-facing message for a login failure"""
        if isinstance(error, ConfigurationError):
            self.console.print(f"[red]Configuration error:[/red] {error}")
        elif isinstance(error, NoAvailablePortError):
            self._report_port_conflict(error.ports)
        elif isinstance(error, PortInUseError):
            self._report_port_conflict([error.port])
        elif isinstance(error, CallbackValidationError):
            self.console.print(f"[red]ERROR:[/red] Authentication callback rejected: {error}")
        elif isinstance(error, (TokenValidationError, InvalidJWTError)):
            self.console.print(f"[red]ERROR:[/red] Received an invalid token: {error}")
        elif isinstance(error, PortalUnauthorizedError):
            self.console.print(f"[red]ERROR:[/red] {error}. Please run the login again.")
        elif isinstance(error, (TokenExchangeError, PortalRequestError)):
            self.console.print(f"[red]ERROR:[/red] Request to UiPath failed: {error}")
        elif isinstance(error, AuthTimeoutError):
            self.console.print(
                f"[yellow]Authentication timed out after {int(error.timeout)} seconds.[/yellow] Please try again."
            )
        elif isinstance(error, AuthCancelledError):
            self.console.print("[yellow]Authentication cancelled[/yellow]")
        elif isinstance(error, (MissingOrganizationError, TenantSelectionError)):
            self.console.print(f"[red]ERROR:[/red] Failed to fetch organization/tenant: {error}")
        elif isinstance(error, AuthServerError):
            self.console.print(f"[red]ERROR:[/red] Could not start the local authentication server: {error}")
        elif isinstance(error, OSError):
            self.console.print(f"[red]ERROR:[/red] Failed to save credentials: {error}")
        else:
            self.console.print(f"[red][ERROR][/red] Authentication failed: {error}")

    async def authenticate(self) -> bool:
        """
        Run the login and report the outcome on the console
        Returns True if successful, False otherwise
        """
        logger.debug(f"Starting authentication flow for domain {self.settings.domain}")
        try:
            result = await self.login()
        except (AuthError, OSError) as e:
            logger.debug(f"Authentication failed: {type(e).__name__}: {e}")
            self.report_error(e)
            return False

        self.show_success(result)
        return True
