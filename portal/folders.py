"""Optional default folder selection after login"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from headers import create_headers
from oauth.authorization import get_base_url
from oauth.errors import AuthError, PortalRequestError, PortalUnauthorizedError
from settings import FOLDERS_ENDPOINT, ORCHESTRATOR_API_PATH, REQUEST_TIMEOUT
from .models import Folder
from .prompts import ChoicePrompt, make_choice_prompt

logger = logging.getLogger(__name__)

SKIP_SELECTION = "__skip__"
SKIP_LABEL = "Skip folder selection"


def get_orchestrator_api_url(domain: str, organization_name: str, tenant_name: str, path: str) -> str:
    return f"{get_base_url(domain)}/{organization_name}/{tenant_name}{ORCHESTRATOR_API_PATH}{path}"


async def get_folders(
    access_token: str,
    domain: str,
    organization_name: str,
    tenant_name: str,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Folder]:
    """List the folders the user can access in a tenant

    Raises:
        PortalUnauthorizedError: On a 401 response
        PortalRequestError: On any other failure
    """
    url = get_orchestrator_api_url(domain, organization_name, tenant_name, FOLDERS_ENDPOINT)
    headers = create_headers(bearer_token=access_token)

    try:
        if client is not None:
            response = await client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as http_client:
                response = await http_client.get(url, headers=headers)
    except httpx.RequestError as e:
        raise PortalRequestError(f"Failed to fetch folders: {e}") from e

    if response.status_code == 401:
        raise PortalUnauthorizedError()
    if not response.is_success:
        raise PortalRequestError(f"Failed to fetch folders: {response.status_code} {response.reason_phrase}")

    try:
        data = response.json()
    except ValueError as e:
        raise PortalRequestError("Failed to fetch folders: invalid JSON response") from e

    items = None
    if isinstance(data, dict):
        # Paged and OData shapes
        items = data.get("PageItems") if isinstance(data.get("PageItems"), list) else data.get("value")
    if not isinstance(items, list):
        logger.warning("Unexpected folder response format")
        return []

    try:
        return [Folder.model_validate(item) for item in items]
    except ValidationError as e:
        raise PortalRequestError(f"Failed to fetch folders: invalid folder entry ({e})") from e


async def select_folder(
    access_token: str,
    domain: str,
    organization_name: str,
    tenant_name: str,
    prompt: Optional[ChoicePrompt] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """Let the user pick a default folder

    The folder is optional, so lookup failures are logged and None is
    returned instead of failing the login.

    Returns:
        The chosen folder key, or None when skipped, empty or unavailable
    """
    try:
        folders = await get_folders(access_token, domain, organization_name, tenant_name, client=client)
    except AuthError as e:
        logger.warning(f"Error selecting folder: {e}")
        return None

    if not folders:
        logger.info("No folders found in this tenant")
        return None

    prompt = prompt or make_choice_prompt()
    choices = [(f"{f.display_name} ({f.fully_qualified_name})", f.key) for f in folders]
    choices.append((SKIP_LABEL, SKIP_SELECTION))

    selection = prompt("Select a folder", choices)
    if not selection or selection == SKIP_SELECTION:
        return None
    return selection
