"""Pydantic request/response schemas."""

from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.health import HealthResponse
from app.schemas.service_instance import (
    GrantAllRequest,
    GrantAllResponse,
    ResourceUsageLogView,
    ServiceInstanceAdminView,
    ServiceInstanceCreateRequest,
    ServiceInstanceDataUpdateRequest,
    ServiceInstanceUpdateRequest,
    ServiceInstanceUserView,
    ServiceInstanceWithToken,
    VerifyUserAbilityRequest,
    VerifyUserAbilityResponse,
    project_instance,
    project_instance_with_token,
)
from app.schemas.user import (
    Privilege,
    UserAdminView,
    UserCreateRequest,
    UserGroupRef,
    UserLookup,
    UserPasswordChangeRequest,
    UserSelfView,
    UserUpdateSelfRequest,
    project_user,
)

__all__ = [
    "GrantAllRequest",
    "GrantAllResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "Privilege",
    "ResourceUsageLogView",
    "ServiceInstanceAdminView",
    "ServiceInstanceCreateRequest",
    "ServiceInstanceDataUpdateRequest",
    "ServiceInstanceUpdateRequest",
    "ServiceInstanceUserView",
    "ServiceInstanceWithToken",
    "UserAdminView",
    "UserCreateRequest",
    "UserGroupRef",
    "UserLookup",
    "UserPasswordChangeRequest",
    "UserSelfView",
    "UserUpdateSelfRequest",
    "VerifyUserAbilityRequest",
    "VerifyUserAbilityResponse",
    "project_instance",
    "project_instance_with_token",
    "project_user",
]
