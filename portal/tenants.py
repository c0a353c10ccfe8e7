"""Organization and tenant lookup for a freshly issued access token"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from headers import create_headers
from oauth.authorization import get_base_url
from oauth.errors import (
    MissingOrganizationError,
    PortalRequestError,
    PortalUnauthorizedError,
    TenantSelectionError,
)
from oauth.jwt_utils import parse_jwt
from oauth.models import SelectedTenant
from settings import PORTAL_API_PATH, REQUEST_TIMEOUT, TENANTS_AND_ORG_ENDPOINT
from .models import Tenant, TenantsAndOrganization
from .prompts import ChoicePrompt, make_choice_prompt

logger = logging.getLogger(__name__)


def get_portal_api_url(domain: str, organization_id: str, path: str) -> str:
    return f"{get_base_url(domain)}/{organization_id}{PORTAL_API_PATH}{path}"


async def get_tenants_and_organization(
    access_token: str,
    domain: str,
    client: Optional[httpx.AsyncClient] = None,
) -> TenantsAndOrganization:
    """Fetch the organization and tenants visible to the token's user

    Args:
        access_token: Access token from the token exchange
        domain: Domain key the token was issued for
        client: Optional httpx client to use instead of a new one

    Returns:
        Parsed TenantsAndOrganization

    Raises:
        InvalidJWTError: If the token cannot be decoded
        MissingOrganizationError: If the token has no organization id
        PortalUnauthorizedError: On a 401 response
        PortalRequestError: On any other failure
    """
    # prt_id first, then organization_id, resolved inside parse_jwt()
    organization_id = parse_jwt(access_token).organization_id
    if not organization_id:
        raise MissingOrganizationError()

    url = get_portal_api_url(domain, organization_id, TENANTS_AND_ORG_ENDPOINT)
    headers = create_headers(bearer_token=access_token)

    logger.debug(f"Fetching tenants for organization {organization_id}")
    try:
        if client is not None:
            response = await client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as http_client:
                response = await http_client.get(url, headers=headers)
    except httpx.RequestError as e:
        raise PortalRequestError(f"Failed to fetch tenants and organization: {e}") from e

    if response.status_code == 401:
        raise PortalUnauthorizedError()
    if not response.is_success:
        raise PortalRequestError(
            f"Failed to fetch tenants and organization: {response.status_code} {response.reason_phrase}"
        )

    try:
        return TenantsAndOrganization.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise PortalRequestError(f"Failed to fetch tenants and organization: invalid response ({e})") from e


def select_tenant(
    data: TenantsAndOrganization,
    prompt: Optional[ChoicePrompt] = None,
) -> SelectedTenant:
    """Pick the tenant to log into

    A single tenant is chosen without prompting so scripted logins keep
    working. With several tenants the user picks one by display name; an
    unknown answer falls back to the first tenant.

    Raises:
        TenantSelectionError: If there is no organization or no tenant
    """
    if data.organization is None:
        raise TenantSelectionError("No organization found")
    if not data.tenants:
        raise TenantSelectionError("No tenants found")

    if len(data.tenants) == 1:
        tenant = data.tenants[0]
        logger.debug(f"Auto-selecting the only tenant: {tenant.name}")
    else:
        prompt = prompt or make_choice_prompt()
        tenant_id = prompt("Select a tenant", [(t.label, t.id) for t in data.tenants])
        tenant = _find_tenant(data, tenant_id)

    organization = data.organization
    return SelectedTenant(
        tenant_id=tenant.id,
        tenant_name=tenant.name,
        tenant_display_name=tenant.label,
        organization_id=organization.id,
        organization_name=organization.name,
        organization_display_name=organization.label,
    )


def _find_tenant(data: TenantsAndOrganization, tenant_id: Optional[str]) -> Tenant:
    for tenant in data.tenants:
        if tenant.id == tenant_id:
            return tenant
    logger.warning(f"Selected tenant {tenant_id!r} not found, using {data.tenants[0].name}")
    return data.tenants[0]


async def resolve_tenant(
    access_token: str,
    domain: str,
    prompt: Optional[ChoicePrompt] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> SelectedTenant:
    """Fetch the caller's tenants and select one"""
    data = await get_tenants_and_organization(access_token, domain, client=client)
    return select_tenant(data, prompt=prompt)
