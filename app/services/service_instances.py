"""Service instance registry: CRUD, per-user listing with tokens, cascading delete."""

import logging
from datetime import datetime, timezone

from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import BadRequestError, NotFoundError
from app.core.security import generate_id
from app.models import ServiceInstance, User, UserInstanceAbility
from app.schemas.service_instance import (
    ServiceInstanceCreateRequest,
    ServiceInstanceDataUpdateRequest,
    ServiceInstanceUpdateRequest,
)
from app.services import usage_logs

logger = logging.getLogger(__name__)

# Columns that reject NULL; an explicit null in a partial update leaves them unchanged.
_NON_NULLABLE_FIELDS = frozenset({"name", "type", "is_enabled"})


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _get_or_404(db: Session, instance_id: str) -> ServiceInstance:
    instance = db.get(ServiceInstance, instance_id)
    if instance is None:
        raise NotFoundError("Service instance not found")
    return instance


def create_instance(db: Session, body: ServiceInstanceCreateRequest) -> ServiceInstance:
    """Insert a new instance under a freshly generated id."""
    now = _now()
    instance = ServiceInstance(
        id=generate_id(),
        **body.model_dump(),
        created_at=now,
        updated_at=now,
    )
    with transaction(db):
        db.add(instance)
    db.refresh(instance)
    logger.info("Service instance created", extra={"instance_id": instance.id})
    return instance


def update_instance(db: Session, body: ServiceInstanceUpdateRequest) -> ServiceInstance:
    """Apply the provided fields and bump updated_at. A missing id is a bad request."""
    if not body.id:
        raise BadRequestError("ID is required")
    instance = _get_or_404(db, body.id)
    changes = body.model_dump(exclude_unset=True, exclude={"id"})
    with transaction(db):
        for field, value in changes.items():
            if value is None and field in _NON_NULLABLE_FIELDS:
                continue
            setattr(instance, field, value)
        instance.updated_at = _now()
    db.refresh(instance)
    return instance


def update_instance_data(db: Session, body: ServiceInstanceDataUpdateRequest) -> ServiceInstance:
    """Replace only the opaque data payload and bump updated_at."""
    if not body.id:
        raise BadRequestError("ID is required")
    instance = _get_or_404(db, body.id)
    with transaction(db):
        instance.data = body.data
        instance.updated_at = _now()
    db.refresh(instance)
    return instance


def list_instances(db: Session) -> list[ServiceInstance]:
    return db.query(ServiceInstance).order_by(ServiceInstance.created_at, ServiceInstance.id).all()


def list_instances_with_token(db: Session, user: User) -> list[tuple[ServiceInstance, str]]:
    """
    Instances the user holds a usable grant for, each paired with the grant's token.

    Inner join: instances without a grant row, or with can_use false, are left out.
    """
    rows = (
        db.query(ServiceInstance, UserInstanceAbility.token)
        .join(
            UserInstanceAbility,
            and_(
                UserInstanceAbility.instance_id == ServiceInstance.id,
                UserInstanceAbility.user_id == user.id,
                UserInstanceAbility.can_use.is_(True),
            ),
        )
        .order_by(ServiceInstance.created_at, ServiceInstance.id)
        .all()
    )
    return [(instance, token) for instance, token in rows]


def get_instance(db: Session, instance_id: str) -> ServiceInstance:
    return _get_or_404(db, instance_id)


def delete_instance(db: Session, instance_id: str, delete_logs: bool) -> None:
    """
    Delete an instance together with its grants, and its usage logs when asked.

    All steps share one transaction; on any failure nothing is deleted.
    """
    with transaction(db):
        grants_deleted = (
            db.query(UserInstanceAbility)
            .filter(UserInstanceAbility.instance_id == instance_id)
            .delete(synchronize_session=False)
        )
        instances_deleted = (
            db.query(ServiceInstance)
            .filter(ServiceInstance.id == instance_id)
            .delete(synchronize_session=False)
        )
        logs_deleted = usage_logs.delete_for_instance(db, instance_id) if delete_logs else 0
    logger.info(
        "Service instance deleted",
        extra={
            "instance_id": instance_id,
            "instances_deleted": instances_deleted,
            "grants_deleted": grants_deleted,
            "logs_deleted": logs_deleted,
        },
    )
