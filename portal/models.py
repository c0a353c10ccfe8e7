"""Pydantic models for the portal and orchestrator APIs"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ServiceInstance(BaseModel):
    """Service provisioned inside a tenant"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    service_instance_id: str = Field(alias="serviceInstanceId")
    service_instance_name: str = Field(alias="serviceInstanceName")
    service_instance_display_name: Optional[str] = Field(default=None, alias="serviceInstanceDisplayName")
    service_url: Optional[str] = Field(default=None, alias="serviceUrl")
    service_type: Optional[str] = Field(default=None, alias="serviceType")
    user_roles: List[str] = Field(default_factory=list, alias="userRoles")


class Tenant(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    display_name: Optional[str] = Field(default=None, alias="displayName")
    service_instances: List[ServiceInstance] = Field(default_factory=list, alias="serviceInstances")

    @property
    def label(self) -> str:
        return self.display_name or self.name


class Organization(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    display_name: Optional[str] = Field(default=None, alias="displayName")

    @property
    def label(self) -> str:
        return self.display_name or self.name


class TenantsAndOrganization(BaseModel):
    """Response of the tenants and organization lookup"""
    model_config = ConfigDict(extra="ignore")

    tenants: List[Tenant] = Field(default_factory=list)
    organization: Optional[Organization] = None


class Folder(BaseModel):
    """Orchestrator folder (the API uses PascalCase keys)"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    key: str = Field(alias="Key")
    display_name: str = Field(alias="DisplayName")
    fully_qualified_name: str = Field(alias="FullyQualifiedName")
    description: Optional[str] = Field(default=None, alias="Description")
    parent_id: Optional[int] = Field(default=None, alias="ParentId")
    provision_type: Optional[str] = Field(default=None, alias="ProvisionType")
    permission_model: Optional[str] = Field(default=None, alias="PermissionModel")
    feed_type: Optional[str] = Field(default=None, alias="FeedType")
    id: Optional[int] = Field(default=None, alias="Id")
