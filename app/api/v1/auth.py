"""
Authorization gate: session, user and admin dependencies.

Every protected route depends on exactly one tier; the tier runs before the
route body and fails the request when its check does not hold:

- ``get_session_context``: a live session cookie (no user row loaded)
- ``get_user_context``: a live session plus the user row it belongs to
- ``require_admin``: as above, and the user has the ADMIN role
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.errors import ForbiddenError, InvalidSessionError, UnauthorizedError
from app.core.sessions import set_session_cookie, validate_session
from app.models import User, UserSession


@dataclass
class AuthContext:
    """What the gate established about the caller."""

    session: UserSession
    user: User | None = None


def get_session_context(
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> AuthContext:
    """Dependency: require a live session cookie. Re-issues the cookie when the session was extended."""
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not session_id:
        raise UnauthorizedError("Not authenticated")
    result = validate_session(db, session_id)
    if result.session is None:
        raise InvalidSessionError("Session is invalid or expired")
    if result.fresh:
        set_session_cookie(response, result.session)
    return AuthContext(session=result.session)


def get_user_context(
    ctx: Annotated[AuthContext, Depends(get_session_context)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthContext:
    """Dependency: require a live session and load the user it belongs to."""
    user = db.get(User, ctx.session.user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return AuthContext(session=ctx.session, user=user)


def require_admin(
    ctx: Annotated[AuthContext, Depends(get_user_context)],
) -> AuthContext:
    """Dependency: require an authenticated user with the ADMIN role. Raises 403 for others."""
    if not ctx.user.is_admin:
        raise ForbiddenError("Admin access required")
    return ctx


SessionCtx = Annotated[AuthContext, Depends(get_session_context)]
UserCtx = Annotated[AuthContext, Depends(get_user_context)]
AdminCtx = Annotated[AuthContext, Depends(require_admin)]
