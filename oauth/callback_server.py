"""
Local loopback server receiving the OAuth browser redirect
"""
import asyncio
import errno
import json
import logging
import secrets
from datetime import datetime, timezone
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Awaitable, Callable, Optional

from aiohttp import web

from settings import (
    AUTH_MAX_REQUESTS,
    AUTH_TIMEOUT,
    CLIENT_ID,
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOWED_ORIGINS,
    DEFAULT_PORT,
    ERROR_LOG_FILE,
    ERROR_MAX_REQUESTS,
    RATE_LIMIT_WINDOW,
    REDIRECT_URI_TEMPLATE,
    ROUTE_ERROR,
    ROUTE_HEALTH,
    ROUTE_OIDC_LOGIN,
    ROUTE_TOKEN,
    SERVER_SHUTDOWN_TIMEOUT,
    TOKEN_MAX_REQUESTS,
)
from .completion import OneShot
from .errors import (
    AuthCancelledError,
    AuthError,
    AuthServerError,
    AuthTimeoutError,
    PortInUseError,
    StateMismatchError,
)
from .models import TokenResponse
from .rate_limiter import RateLimiter, rate_limit_middleware
from .token_exchange import exchange_code_for_tokens
from .validators import validate_token_exchange_request

logger = logging.getLogger(__name__)

ExchangeFunc = Callable[[str], Awaitable[TokenResponse]]

# Served at the redirect target. Reads code/state from the query string and
# posts them back to the token route; provider errors go to the error route.
CALLBACK_PAGE_HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>UiPath CLI Authentication</title>
    <style>
        body { font-family: -apple-system, "Segoe UI", sans-serif; text-align: center; padding: 60px; }
        .success { color: #2e7d32; }
        .error { color: #c62828; }
    </style>
</head>
<body>
    <h1 id="title">Completing authentication...</h1>
    <p id="message">Please wait while the CLI finishes signing you in.</p>
    <script>
        function show(title, message, cls) {
            var t = document.getElementById("title");
            t.textContent = title;
            t.className = cls;
            document.getElementById("message").textContent = message;
        }

        function reportError(error) {
            fetch("/error", {
                method: "POST",
                headers: { "Content-Type": "application/json" },
                body: JSON.stringify({ error: String(error) })
            }).catch(function () {});
        }

        var params = new URLSearchParams(window.location.search);
        var code = params.get("code");
        var state = params.get("state");
        var providerError = params.get("error");

        if (providerError) {
            var description = params.get("error_description") || "";
            reportError(providerError + ": " + description);
            show("Authentication Failed", providerError + " " + description, "error");
        } else if (!code || !state) {
            reportError("Missing code or state in callback");
            show("Authentication Failed", "Missing code or state parameter.", "error");
        } else {
            fetch("/token", {
                method: "POST",
                headers: { "Content-Type": "application/json" },
                body: JSON.stringify({ code: code, state: state })
            })
                .then(function (response) { return response.json(); })
                .then(function (data) {
                    if (data.success) {
                        show("Authentication Successful!", "You can now close this window and return to the terminal.", "success");
                        setTimeout(function () { window.close(); }, 2000);
                    } else {
                        show("Authentication Failed", data.error || "Unknown error", "error");
                    }
                })
                .catch(function (error) {
                    reportError(error);
                    show("Authentication Failed", String(error), "error");
                });
        }
    </script>
</body>
</html>
"""


class ServerState(Enum):
    IDLE = "idle"
    LISTENING = "listening"
    AWAITING_CALLBACK = "awaiting_callback"
    EXCHANGING = "exchanging"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    STOPPED = "stopped"


def is_allowed_origin(origin: Optional[str]) -> bool:
    return bool(origin) and any(origin.startswith(allowed) for allowed in CORS_ALLOWED_ORIGINS)


@web.middleware
async def cors_middleware(request: web.Request, handler):
    """Restrict cross-origin reads to loopback origins; answer preflights directly"""
    if request.method == "OPTIONS":
        response = web.Response(status=204)
    else:
        response = await handler(request)

    origin = request.headers.get("Origin")
    response.headers["Access-Control-Allow-Origin"] = origin if is_allowed_origin(origin) else "null"
    response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
    return response


class AuthServer:
    """Temporary HTTP server for one Authorization Code + PKCE login

    Exactly one outcome is delivered through wait(): the validated
    TokenResponse, or the error that ended the attempt (state mismatch,
    exchange failure, timeout, or cancellation by stop()).

    Args:
        port: Loopback port to bind
        domain: Domain key used for the token exchange
        code_verifier: PKCE verifier for this attempt
        expected_state: State sent in the authorization URL
        timeout: Seconds to wait for the callback
        client_id: OAuth client id
        redirect_uri_template: Redirect URI containing the default port
        error_log_file: File receiving client-reported errors
        exchange: Coroutine turning a code into tokens (defaults to the
            real token endpoint call)
        host: Interface to bind
    """

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        domain: str = "cloud",
        code_verifier: str = "",
        expected_state: str = "",
        timeout: float = AUTH_TIMEOUT,
        client_id: str = CLIENT_ID,
        redirect_uri_template: str = REDIRECT_URI_TEMPLATE,
        error_log_file: Optional[Path] = None,
        exchange: Optional[ExchangeFunc] = None,
        host: str = "localhost",
    ):
        self.port = port
        self.domain = domain
        self.expected_state = expected_state
        self.timeout = timeout
        self.host = host
        self.error_log_file = Path(error_log_file) if error_log_file else Path.cwd() / ERROR_LOG_FILE
        self.state = ServerState.IDLE

        self._code_verifier = code_verifier
        self._exchange: ExchangeFunc = exchange or partial(
            self._default_exchange,
            client_id=client_id,
            redirect_uri_template=redirect_uri_template,
        )
        self._completion: Optional[OneShot] = None
        self._runner: Optional[web.AppRunner] = None
        self._timeout_handle: Optional[asyncio.TimerHandle] = None
        self._stop_task: Optional[asyncio.Task] = None

        self.app = self._create_app()

    def _create_app(self) -> web.Application:
        limiters = {
            ROUTE_OIDC_LOGIN: RateLimiter(
                AUTH_MAX_REQUESTS, RATE_LIMIT_WINDOW,
                "Too many authentication attempts, please try again later",
            ),
            ROUTE_TOKEN: RateLimiter(
                TOKEN_MAX_REQUESTS, RATE_LIMIT_WINDOW,
                "Too many token exchange attempts, please try again later",
            ),
            ROUTE_ERROR: RateLimiter(
                ERROR_MAX_REQUESTS, RATE_LIMIT_WINDOW,
                "Too many error reports, please try again later",
            ),
        }
        app = web.Application(middlewares=[cors_middleware, rate_limit_middleware(limiters)])
        app.router.add_get(ROUTE_OIDC_LOGIN, self._handle_login)
        app.router.add_post(ROUTE_TOKEN, self._handle_token)
        app.router.add_post(ROUTE_ERROR, self._handle_error)
        app.router.add_get(ROUTE_HEALTH, self._handle_health)
        return app

    async def _default_exchange(self, code: str, client_id: str, redirect_uri_template: str) -> TokenResponse:
        return await exchange_code_for_tokens(
            code,
            self._code_verifier,
            self.domain,
            port=self.port,
            client_id=client_id,
            redirect_uri_template=redirect_uri_template,
        )

    async def _handle_login(self, request: web.Request) -> web.Response:
        """Serve the page that forwards code/state to the token route"""
        return web.Response(text=CALLBACK_PAGE_HTML, content_type="text/html")

    async def _handle_token(self, request: web.Request) -> web.Response:
        """Validate the callback, exchange the code and complete the login"""
        if self._completion is None or self._completion.done:
            return web.json_response(
                {"success": False, "error": "Authentication already completed"},
                status=400,
            )
        if self.state == ServerState.EXCHANGING:
            return web.json_response(
                {"success": False, "error": "Token exchange already in progress"},
                status=400,
            )

        try:
            try:
                body = await request.json()
            except ValueError:
                body = None

            code, state = validate_token_exchange_request(body)

            # Never reach the token endpoint with a forged or stale state
            if not secrets.compare_digest(state.encode("utf-8"), self.expected_state.encode("utf-8")):
                raise StateMismatchError()

            self.state = ServerState.EXCHANGING
            tokens = await self._exchange(code)
        except Exception as e:
            if not isinstance(e, AuthError):
                logger.exception("Unexpected error during token exchange")
            self._finish(error=e)
            return web.json_response({"success": False, "error": str(e)}, status=400)

        self._finish(tokens=tokens)
        return web.json_response({"success": True})

    async def _handle_error(self, request: web.Request) -> web.Response:
        """Append a client-reported error to the error log (best effort)"""
        try:
            body = await request.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else body
        logger.error(f"Client error: {error}")

        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        try:
            with open(self.error_log_file, "a", encoding="utf-8") as f:
                f.write(f"[{timestamp}] {error}\n")
        except OSError as e:
            logger.error(f"Failed to write error log: {e}")

        return web.Response(status=200)

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "port": self.port})

    def _finish(self, tokens: Optional[TokenResponse] = None, error: Optional[BaseException] = None) -> None:
        self._cancel_timeout()
        if error is not None:
            if self._completion.reject(error):
                self.state = ServerState.REJECTED
                logger.info(f"Authentication failed: {error}")
        elif self._completion.resolve(tokens):
            self.state = ServerState.RESOLVED
            logger.info("Authentication callback completed")

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def _on_timeout(self) -> None:
        self._timeout_handle = None
        if self._completion.reject(AuthTimeoutError(self.timeout)):
            self.state = ServerState.REJECTED
            logger.warning(f"No authentication callback after {self.timeout} seconds")
        self._stop_task = asyncio.ensure_future(self.stop())

    @property
    def completion(self) -> Optional[OneShot]:
        return self._completion

    async def start(self) -> None:
        """Bind the listener, register the pending login and arm the timeout

        Raises:
            PortInUseError: If the port is already bound
            AuthServerError: If the listener cannot start for another reason
        """
        if self.state != ServerState.IDLE:
            raise AuthServerError(f"Auth server cannot start from state {self.state.value}")

        self._completion = OneShot()
        self._runner = web.AppRunner(self.app, shutdown_timeout=SERVER_SHUTDOWN_TIMEOUT)
        await self._runner.setup()

        site = web.TCPSite(self._runner, host=self.host, port=self.port)
        try:
            await site.start()
        except OSError as e:
            await self._runner.cleanup()
            self._runner = None
            self.state = ServerState.STOPPED
            if e.errno == errno.EADDRINUSE:
                logger.error(f"Port {self.port} is already in use")
                raise PortInUseError(self.port) from e
            error = AuthServerError(f"Failed to start auth server on port {self.port}: {e}")
            self._completion.reject(error)
            raise error from e

        self.state = ServerState.LISTENING
        logger.info(f"Auth server listening on {self.host}:{self.port}")

        self._timeout_handle = asyncio.get_running_loop().call_later(self.timeout, self._on_timeout)
        self.state = ServerState.AWAITING_CALLBACK

    async def wait(self) -> TokenResponse:
        """Wait for the login outcome

        Returns:
            TokenResponse delivered by the token route

        Raises:
            AuthError: The error that ended the attempt
        """
        if self._completion is None:
            raise AuthServerError("Auth server has not been started")
        try:
            return await self._completion.wait()
        finally:
            if self._stop_task is not None:
                await self._stop_task

    async def stop(self) -> None:
        """Stop the server; a still pending login is rejected as cancelled

        Safe to call more than once.
        """
        if self.state == ServerState.STOPPED:
            return

        self._cancel_timeout()
        if self._completion is not None and self._completion.reject(AuthCancelledError()):
            self.state = ServerState.REJECTED
            logger.info("Authentication cancelled")

        runner, self._runner = self._runner, None
        self.state = ServerState.STOPPED
        if runner is not None:
            await runner.cleanup()
            logger.info("Auth server stopped")
