"""OAuth token exchange functionality"""

import logging
from typing import Optional

import httpx

from headers import CONTENT_TYPE_FORM, create_headers
from settings import (
    CLIENT_ID,
    DEFAULT_PORT,
    GRANT_TYPE,
    REDIRECT_URI_TEMPLATE,
    REQUEST_TIMEOUT,
)
from .authorization import build_redirect_uri, get_token_endpoint_url
from .errors import TokenExchangeError
from .models import TokenResponse
from .validators import validate_token_response

logger = logging.getLogger(__name__)


async def exchange_code_for_tokens(
    code: str,
    code_verifier: str,
    domain: str,
    port: int = DEFAULT_PORT,
    client_id: str = CLIENT_ID,
    redirect_uri_template: str = REDIRECT_URI_TEMPLATE,
    client: Optional[httpx.AsyncClient] = None,
) -> TokenResponse:
    """Exchange an authorization code for tokens

    Performs exactly one request; retrying is up to the caller.

    Args:
        code: Authorization code from the callback
        code_verifier: PKCE verifier generated for this attempt
        domain: Domain key used to locate the token endpoint
        port: Port the callback server is bound to (part of redirect_uri)
        client_id: OAuth client id
        redirect_uri_template: Redirect URI containing the default port
        client: Optional httpx client to use instead of a new one

    Returns:
        Validated TokenResponse

    Raises:
        TokenExchangeError: If the request fails or returns a non-2xx status
        TokenValidationError: If the response body is missing mandatory fields
    """
    token_endpoint = get_token_endpoint_url(domain)
    form = {
        "grant_type": GRANT_TYPE,
        "code": code,
        "redirect_uri": build_redirect_uri(redirect_uri_template, DEFAULT_PORT, port),
        "client_id": client_id,
        "code_verifier": code_verifier,
    }
    headers = create_headers(content_type=CONTENT_TYPE_FORM)

    logger.debug(f"Exchanging authorization code at {token_endpoint}")
    try:
        if client is not None:
            response = await client.post(token_endpoint, data=form, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as http_client:
                response = await http_client.post(token_endpoint, data=form, headers=headers)
    except httpx.RequestError as e:
        raise TokenExchangeError(f"Token exchange failed: {e}") from e

    if not response.is_success:
        error_detail = response.text
        logger.error(f"Token exchange failed with status {response.status_code}")
        raise TokenExchangeError(
            f"Token exchange failed: {response.status_code} - {error_detail}",
            status_code=response.status_code,
            body=error_detail,
        )

    try:
        token_data = response.json()
    except ValueError as e:
        raise TokenExchangeError(
            "Token exchange failed: invalid JSON response",
            status_code=response.status_code,
            body=response.text,
        ) from e

    tokens = validate_token_response(token_data)
    logger.info("OAuth tokens obtained")
    return tokens
