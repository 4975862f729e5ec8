"""
Server-side login sessions: create, validate (with sliding expiry), invalidate,
and the cookie that carries the opaque session id.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import generate_session_id
from app.models import UserSession

logger = logging.getLogger(__name__)


@dataclass
class SessionValidation:
    """Outcome of validating a session id. ``fresh`` means the expiry was extended."""

    session: UserSession | None
    fresh: bool = False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Some backends (sqlite) hand back naive datetimes for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _session_lifetime() -> timedelta:
    return timedelta(hours=settings.SESSION_EXPIRE_HOURS)


def create_session(db: Session, user_id: str, current_ip: str | None = None) -> UserSession:
    """Persist a new session bound to ``user_id`` and return it."""
    row = UserSession(
        id=generate_session_id(),
        user_id=user_id,
        current_ip=current_ip,
        expires_at=_now() + _session_lifetime(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Session created", extra={"user_id": user_id})
    return row


def validate_session(db: Session, session_id: str) -> SessionValidation:
    """
    Look up a session by id.

    Unknown ids yield no session. Expired rows are deleted and yield no
    session. When less than half of the lifetime remains, the expiry is
    pushed out by a full lifetime and the result is marked fresh.
    """
    row = db.get(UserSession, session_id)
    if row is None:
        return SessionValidation(session=None)

    now = _now()
    expires_at = _as_utc(row.expires_at)
    if expires_at <= now:
        db.delete(row)
        db.commit()
        logger.info("Expired session removed", extra={"user_id": row.user_id})
        return SessionValidation(session=None)

    lifetime = _session_lifetime()
    if expires_at - now < lifetime / 2:
        row.expires_at = now + lifetime
        db.commit()
        db.refresh(row)
        return SessionValidation(session=row, fresh=True)
    return SessionValidation(session=row)


def invalidate_session(db: Session, session_id: str) -> None:
    """Delete the session. Deleting a session that no longer exists is a no-op."""
    deleted = (
        db.query(UserSession)
        .filter(UserSession.id == session_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("Session invalidated")


def delete_expired_sessions(db: Session) -> int:
    """Remove every session whose expiry has passed. Idempotent."""
    deleted = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= _now())
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


def set_session_cookie(response: Response, session: UserSession) -> None:
    """Attach the session cookie, expiring together with the session row."""
    expires_at = _as_utc(session.expires_at)
    max_age = max(int((expires_at - _now()).total_seconds()), 0)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session.id,
        max_age=max_age,
        expires=expires_at,
        path="/",
        httponly=True,
        secure=settings.APP_ENV == "prod",
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    """Tell the browser to drop the session cookie."""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.APP_ENV == "prod",
        samesite="lax",
    )
