"""Pydantic schemas for service instances, grants, verification and usage logs."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, IPvAnyAddress

from app.models.service_instance import ServiceInstance
from app.schemas.user import Privilege


class ServiceInstanceCreateRequest(BaseModel):
    model_config = {"extra": "forbid"}

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    type: str = Field(default="generic", min_length=1, max_length=64)
    url: str | None = Field(default=None, max_length=2048)
    is_enabled: bool = True
    data: Any = None


class ServiceInstanceUpdateRequest(BaseModel):
    """
    Partial update. ``id`` is optional in the schema so that a missing id
    reaches the handler and is reported as a bad request.
    """

    model_config = {"extra": "forbid"}

    id: str | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    type: str | None = Field(default=None, min_length=1, max_length=64)
    url: str | None = Field(default=None, max_length=2048)
    is_enabled: bool | None = None
    data: Any = None


class ServiceInstanceDataUpdateRequest(BaseModel):
    model_config = {"extra": "forbid"}

    id: str | None = None
    data: Any = None


class ServiceInstanceUserView(BaseModel):
    """Instance fields visible to any authenticated user. The data payload is admin-only."""

    model_config = {"from_attributes": True}

    id: str
    name: str
    description: str | None = None
    type: str
    url: str | None = None
    is_enabled: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ServiceInstanceAdminView(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    name: str
    description: str | None = None
    type: str
    url: str | None = None
    is_enabled: bool
    data: Any = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ServiceInstanceWithToken(ServiceInstanceUserView):
    """An instance the caller may use, with the caller's access token for it."""

    token: str


class GrantAllRequest(BaseModel):
    instance_id: str = Field(..., min_length=1)


class GrantAllResponse(BaseModel):
    instance_id: str
    granted: int = Field(description="Number of active users holding a usable grant")


class VerifyUserAbilityRequest(BaseModel):
    """
    Sent by a service instance to resolve a user's access token.

    Both IPs must be present (possibly null) and well-formed when set.
    """

    instance_id: str = Field(..., min_length=1)
    user_token: str = Field(..., min_length=1)
    request_ip: IPvAnyAddress | None
    user_ip: IPvAnyAddress | None


class VerifyUserAbilityResponse(BaseModel):
    user_id: str


class ResourceUsageLogView(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    instance_id: str
    user_id: str | None = None
    type: str
    data: Any = None
    created_at: datetime | None = None


def project_instance(
    instance: ServiceInstance, privilege: Privilege
) -> ServiceInstanceUserView | ServiceInstanceAdminView:
    """Shape a service instance row for a caller with the given read privilege."""
    if privilege == "admin":
        return ServiceInstanceAdminView.model_validate(instance)
    return ServiceInstanceUserView.model_validate(instance)


def project_instance_with_token(instance: ServiceInstance, token: str) -> ServiceInstanceWithToken:
    """User view of an instance annotated with the caller's grant token."""
    view = ServiceInstanceUserView.model_validate(instance)
    return ServiceInstanceWithToken(**view.model_dump(), token=token)
