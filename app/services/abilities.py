"""Access grant ledger: bulk grants to active users and token verification for instances."""

import logging
from datetime import datetime, timezone
from ipaddress import IPv4Address, IPv6Address

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.core.database import transaction
from app.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from app.core.security import generate_access_token
from app.models import ServiceInstance, User, UserInstanceAbility

logger = logging.getLogger(__name__)

IPAddress = IPv4Address | IPv6Address

# Dialect-specific INSERT constructs that support ON CONFLICT DO UPDATE.
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _upsert_grant(db: Session, user_id: str, instance_id: str, now: datetime) -> None:
    """
    Insert a usable grant with a new token, or re-enable the existing one.

    On conflict only can_use and updated_at change; the stored token is kept.
    """
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Upsert is not supported for database dialect {dialect!r}")
    stmt = (
        insert(UserInstanceAbility)
        .values(
            user_id=user_id,
            instance_id=instance_id,
            token=generate_access_token(),
            can_use=True,
            updated_at=now,
        )
        .on_conflict_do_update(
            index_elements=["user_id", "instance_id"],
            set_={"can_use": True, "updated_at": now},
        )
    )
    db.execute(stmt)


def grant_to_all_active_users(db: Session, instance_id: str) -> int:
    """
    Give every active user a usable grant for the instance, in one transaction.

    Returns the number of active users processed. Users that already had a
    grant keep their token; revoked grants are re-enabled.
    """
    if db.get(ServiceInstance, instance_id) is None:
        raise NotFoundError("Service instance not found")

    now = datetime.now(timezone.utc)
    with transaction(db):
        user_ids = [
            user_id
            for (user_id,) in db.query(User.id).filter(User.is_active.is_(True)).all()
        ]
        for user_id in user_ids:
            _upsert_grant(db, user_id, instance_id, now)
    logger.info(
        "Granted instance to all active users",
        extra={"instance_id": instance_id, "user_count": len(user_ids)},
    )
    return len(user_ids)


def verify_user_ability(
    db: Session,
    instance_id: str,
    token: str,
    request_ip: IPAddress | None = None,
    user_ip: IPAddress | None = None,
) -> str:
    """
    Resolve an access token presented by a service instance to the owning user id.

    Raises UnauthorizedError when the (instance, token) pair is unknown and
    ForbiddenError when the grant exists but is revoked. The IP addresses are
    only recorded in the log.
    """
    grant = (
        db.query(UserInstanceAbility)
        .filter(
            UserInstanceAbility.instance_id == instance_id,
            UserInstanceAbility.token == token,
        )
        .first()
    )
    if grant is None:
        logger.info("Ability verification failed", extra={"instance_id": instance_id, "reason": "invalid_token"})
        raise UnauthorizedError("Invalid token")
    if grant.instance_id != instance_id:
        raise UnauthorizedError("Invalid instanceId")
    if not grant.can_use:
        logger.info(
            "Ability verification refused",
            extra={"instance_id": instance_id, "user_id": grant.user_id, "reason": "revoked"},
        )
        raise ForbiddenError("You are not permitted to use this instance")

    logger.info(
        "Ability verified",
        extra={
            "instance_id": instance_id,
            "user_id": grant.user_id,
            "request_ip": str(request_ip) if request_ip is not None else None,
            "user_ip": str(user_ip) if user_ip is not None else None,
        },
    )
    return grant.user_id
