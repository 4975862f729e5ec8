"""ORM model for server-side login sessions."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func

from app.models.base import Base


class UserSession(Base):
    """
    One login session. The id is the opaque value carried in the session cookie.

    Rows are removed on logout and when found expired.
    """

    __tablename__ = "user_sessions"

    id = Column(String(64), primary_key=True)
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    current_ip = Column(String(45), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
