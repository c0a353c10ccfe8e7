"""CLI entry point and argument parsing"""

import argparse
import asyncio
import sys
from typing import List, Optional

from rich.console import Console

import settings
from config import load_auth_settings
from oauth.errors import ConfigurationError
from oauth.flow import AuthOrchestrator
from utils.storage import TokenStore
from cli.auth_handlers import handle_login, handle_logout
from cli.debug_setup import setup_debug_console
from cli.status_display import show_token_status


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uipath-auth",
        description="Authenticate the UiPath CLI with UiPath services",
    )
    parser.add_argument(
        "--domain",
        choices=sorted(settings.BASE_URLS),
        default=None,
        help="UiPath domain to authenticate with (default: from config, else cloud)",
    )
    shorthands = parser.add_mutually_exclusive_group()
    for domain in (settings.DOMAIN_ALPHA, settings.DOMAIN_CLOUD, settings.DOMAIN_STAGING):
        shorthands.add_argument(
            f"--{domain}",
            dest="domain_shorthand",
            action="store_const",
            const=domain,
            help=f"Authenticate with the {domain} domain (shorthand for --domain {domain})",
        )
    parser.add_argument("--port", "-p", type=int, default=None, help="Preferred local callback port")
    parser.add_argument("--logout", "-l", action="store_true", help="Logout and clear stored credentials")
    parser.add_argument("--force", "-f", action="store_true", help="Force re-authentication even if a valid token exists")
    parser.add_argument("--status", action="store_true", help="Show the stored login and exit")
    parser.add_argument("--no-folder", action="store_true", help="Skip default folder selection")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None):
    """Entry point for the CLI"""
    global console

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.domain and args.domain_shorthand and args.domain != args.domain_shorthand:
        parser.error(f"--domain {args.domain} conflicts with --{args.domain_shorthand}")
    domain = args.domain_shorthand or args.domain

    console = setup_debug_console(args.debug, domain or "(from config)")

    try:
        auth_settings = load_auth_settings(domain=domain, port=args.port)
        store = TokenStore(auth_settings.auth_file, auth_settings.env_file)

        if args.status:
            show_token_status(store, console)
            return

        if args.logout:
            if not handle_logout(store, console):
                sys.exit(1)
            return

        orchestrator = AuthOrchestrator(
            auth_settings,
            store=store,
            console=console,
            select_folders=not args.no_folder,
        )
        if not asyncio.run(handle_login(orchestrator, console, force=args.force)):
            sys.exit(1)

    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
