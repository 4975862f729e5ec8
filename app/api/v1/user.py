"""User endpoints: login/logout and user management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import AdminCtx, SessionCtx, UserCtx
from app.core.database import get_db
from app.core.sessions import clear_session_cookie, create_session, invalidate_session, set_session_cookie
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.user import (
    UserAdminView,
    UserCreateRequest,
    UserLookup,
    UserPasswordChangeRequest,
    UserSelfView,
    UserUpdateSelfRequest,
    project_user,
)
from app.services import users as users_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with username and password and start a session.

    The session id is returned only as an HttpOnly cookie.
    """
    user = users_service.authenticate(db, body.username, body.password)
    client_ip = request.client.host if request.client else None
    session = create_session(db, user.id, current_ip=client_ip)
    set_session_cookie(response, session)
    logger.info("Login succeeded", extra={"user_id": user.id, "username": user.username})
    return LoginResponse(user_id=user.id, username=user.username)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    ctx: SessionCtx,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """End the current session and clear the cookie."""
    invalidate_session(db, ctx.session.id)
    clear_session_cookie(response)


@router.post("", response_model=UserAdminView, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreateRequest,
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
) -> UserAdminView:
    """Create a user (admin only). The password is stored as a bcrypt hash."""
    user = users_service.create_user(db, body.user, body.group, body.password)
    return project_user(user, "admin")


@router.get("", response_model=list[UserAdminView])
def get_all_users(
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
) -> list[UserAdminView]:
    """List all users with their group (admin only)."""
    return [project_user(u, "admin") for u in users_service.list_users(db)]


@router.get("/me", response_model=UserSelfView)
def get_self(ctx: UserCtx) -> UserSelfView:
    return project_user(ctx.user, "user")


@router.patch("/me", response_model=UserSelfView)
def update_self(
    body: UserUpdateSelfRequest,
    ctx: UserCtx,
    db: Annotated[Session, Depends(get_db)],
) -> UserSelfView:
    """Update the caller's own profile fields."""
    user = users_service.update_self(db, ctx.user, body)
    return project_user(user, "user")


@router.get("/lookup", response_model=UserAdminView)
def get_user(
    lookup: Annotated[UserLookup, Query()],
    _admin: AdminCtx,
    db: Annotated[Session, Depends(get_db)],
) -> UserAdminView:
    """Exact-match lookup by id or username (admin only)."""
    return project_user(users_service.get_user(db, lookup), "admin")


@router.put("/password", response_model=UserAdminView | UserSelfView)
def change_password(
    body: UserPasswordChangeRequest,
    ctx: UserCtx,
    db: Annotated[Session, Depends(get_db)],
) -> UserAdminView | UserSelfView:
    """
    Set a new password. Admins may target any user; everyone else only
    themselves (403 otherwise).
    """
    user = users_service.change_password(db, ctx.user, body.id, body.password)
    return project_user(user, "admin" if ctx.user.is_admin else "user")
