"""Portal and orchestrator lookups performed after the token exchange"""

from .models import Folder, Organization, ServiceInstance, Tenant, TenantsAndOrganization
from .tenants import get_tenants_and_organization, resolve_tenant, select_tenant
from .folders import get_folders, select_folder

__all__ = [
    "Folder",
    "Organization",
    "ServiceInstance",
    "Tenant",
    "TenantsAndOrganization",
    "get_tenants_and_organization",
    "resolve_tenant",
    "select_tenant",
    "get_folders",
    "select_folder",
]
