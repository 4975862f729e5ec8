"""Service instance endpoints: registry CRUD, grants, and token verification for instances."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.v1.auth import AdminCtx, SessionCtx, UserCtx
from app.core.database import get_db
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
from app.services import abilities, service_instances, usage_logs

router = APIRouter()


@router.post("", response_model=ServiceInstanceAdminView, status_code=status.HTTP_201_CREATED)
def create_instance(
    body: ServiceInstanceCreateRequest,
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
) -> ServiceInstanceAdminView:
    instance = service_instances.create_instance(db, body)
    return project_instance(instance, "admin")


@router.post("/grant-all", response_model=GrantAllResponse)
def grant_to_all_active_users(
    body: GrantAllRequest,
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
) -> GrantAllResponse:
    """
    Give every active user a usable grant for the instance (admin only).

    Existing tokens are kept; revoked grants are re-enabled. All-or-nothing.
    """
    granted = abilities.grant_to_all_active_users(db, body.instance_id)
    return GrantAllResponse(instance_id=body.instance_id, granted=granted)


@router.patch("", response_model=ServiceInstanceAdminView)
def update_instance(
    body: ServiceInstanceUpdateRequest,
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
) -> ServiceInstanceAdminView:
    """Partially update an instance (admin only). 400 when the body has no id."""
    instance = service_instances.update_instance(db, body)
    return project_instance(instance, "admin")


@router.patch("/data", response_model=ServiceInstanceAdminView)
def update_instance_data(
    body: ServiceInstanceDataUpdateRequest,
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
) -> ServiceInstanceAdminView:
    """Replace only the data payload of an instance (admin only)."""
    instance = service_instances.update_instance_data(db, body)
    return project_instance(instance, "admin")


@router.get("/admin", response_model=list[ServiceInstanceAdminView])
def get_all_admin(
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
) -> list[ServiceInstanceAdminView]:
    return [project_instance(i, "admin") for i in service_instances.list_instances(db)]


@router.get("/with-token", response_model=list[ServiceInstanceWithToken])
def get_all_with_token(
    ctx: UserCtx,
    db: Annotated[Session, Depends(get_db)],
) -> list[ServiceInstanceWithToken]:
    """Instances the caller may use, each with the caller's access token."""
    rows = service_instances.list_instances_with_token(db, ctx.user)
    return [project_instance_with_token(instance, token) for instance, token in rows]


@router.post("/verify-user-ability", response_model=VerifyUserAbilityResponse)
def verify_user_ability(
    body: VerifyUserAbilityRequest,
    db: Annotated[Session, Depends(get_db)],
) -> VerifyUserAbilityResponse:
    """
    Called by service instances (no session): exchange a user's access token
    for the user id. 401 for an unknown token, 403 for a revoked grant.
    """
    user_id = abilities.verify_user_ability(
        db,
        instance_id=body.instance_id,
        token=body.user_token,
        request_ip=body.request_ip,
        user_ip=body.user_ip,
    )
    return VerifyUserAbilityResponse(user_id=user_id)


@router.get("/{instance_id}/usage-logs", response_model=list[ResourceUsageLogView])
def get_usage_logs(
    instance_id: str,
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[ResourceUsageLogView]:
    """Most recent usage events of an instance (admin only)."""
    logs = usage_logs.list_for_instance(db, instance_id, limit=limit)
    return [ResourceUsageLogView.model_validate(log) for log in logs]


@router.get("/{instance_id}", response_model=ServiceInstanceUserView)
def get_by_id(
    instance_id: str,
    _ctx: SessionCtx,
    db: Annotated[Session, Depends(get_db)],
) -> ServiceInstanceUserView:
    return project_instance(service_instances.get_instance(db, instance_id), "user")


@router.delete("/{instance_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_instance(
    instance_id: str,
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
    delete_logs: Annotated[bool, Query(description="Also delete the instance's usage logs")],
) -> None:
    """Delete an instance and its grants, and its usage logs when delete_logs is true (admin only)."""
    service_instances.delete_instance(db, instance_id, delete_logs=delete_logs)
