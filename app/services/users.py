"""Credential store: login verification and user CRUD."""

import logging

from sqlalchemy.orm import Session, joinedload

from app.core.database import transaction
from app.core.errors import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from app.core.security import hash_password, verify_decoy_password, verify_password
from app.models import User, UserGroup
from app.schemas.user import (
    UserCreateFields,
    UserGroupRef,
    UserLookup,
    UserUpdateSelfRequest,
)

logger = logging.getLogger(__name__)

# Same message for unknown user and wrong password.
LOGIN_FAILED_MESSAGE = "Wrong username or password"


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Return the user whose credentials match, or raise UnauthorizedError.

    An unknown username still pays for one bcrypt check (against a decoy
    hash) so both failure paths take comparable time.
    """
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        verify_decoy_password(password)
        logger.info("Login failed", extra={"username": username, "reason": "unknown_user"})
        raise UnauthorizedError(LOGIN_FAILED_MESSAGE)
    if not verify_password(password, user.hashed_password):
        logger.info("Login failed", extra={"username": username, "reason": "bad_password"})
        raise UnauthorizedError(LOGIN_FAILED_MESSAGE)
    return user


def _get_or_create_group(db: Session, group_ref: UserGroupRef) -> UserGroup:
    group = db.query(UserGroup).filter(UserGroup.name == group_ref.name).first()
    if group is None:
        group = UserGroup(name=group_ref.name)
        db.add(group)
        db.flush()
    return group


def create_user(
    db: Session,
    fields: UserCreateFields,
    group_ref: UserGroupRef,
    password: str,
) -> User:
    """Create a user in the referenced group. Only the bcrypt hash of ``password`` is stored."""
    if db.query(User.id).filter(User.username == fields.username).first() is not None:
        raise BadRequestError("Username is already taken")

    hashed_password = hash_password(password)
    with transaction(db):
        group = _get_or_create_group(db, group_ref)
        user = User(
            **fields.model_dump(),
            hashed_password=hashed_password,
            group_id=group.id,
        )
        db.add(user)
    db.refresh(user)
    logger.info(
        "User created",
        extra={"user_id": user.id, "username": user.username, "role": user.role.value},
    )
    return user


def get_user(db: Session, lookup: UserLookup) -> User:
    """Exact-match lookup by id or username. Raises NotFoundError when nothing matches."""
    query = db.query(User).options(joinedload(User.group))
    if lookup.id is not None:
        query = query.filter(User.id == lookup.id)
    else:
        query = query.filter(User.username == lookup.username)
    user = query.first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_self(db: Session, user: User, changes: UserUpdateSelfRequest) -> User:
    """Apply the provided self-editable fields to the caller's own row."""
    with transaction(db):
        for field, value in changes.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
    db.refresh(user)
    return user


def change_password(db: Session, actor: User, user_id: str, new_password: str) -> User:
    """
    Re-hash and store a new password for ``user_id``.

    Non-admins may only target their own id; the check happens before any write.
    """
    if not actor.is_admin and user_id != actor.id:
        logger.warning(
            "Password change refused",
            extra={"actor_id": actor.id, "target_id": user_id},
        )
        raise ForbiddenError("You can only change your own password")

    target = db.get(User, user_id)
    if target is None:
        raise NotFoundError("User not found")

    hashed_password = hash_password(new_password)
    with transaction(db):
        target.hashed_password = hashed_password
    db.refresh(target)
    logger.info("Password changed", extra={"actor_id": actor.id, "target_id": user_id})
    return target


def list_users(db: Session) -> list[User]:
    """All users with their group, oldest first."""
    return (
        db.query(User)
        .options(joinedload(User.group))
        .order_by(User.created_at, User.username)
        .all()
    )
