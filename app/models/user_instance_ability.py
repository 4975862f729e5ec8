"""ORM model for the access grant ledger: one row per (user, service instance)."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, func

from app.models.base import Base


class UserInstanceAbility(Base):
    """
    Whether a user may use a service instance, plus the bearer token the
    instance presents back to the panel to identify that user.
    """

    __tablename__ = "user_instance_abilities"

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    instance_id = Column(
        String(36),
        ForeignKey("service_instances.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    token = Column(String(128), nullable=False, unique=True, index=True)
    can_use = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
