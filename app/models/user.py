"""ORM models for panel users and the groups they belong to."""

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, String, func
from sqlalchemy.orm import relationship

from app.core.security import generate_id
from app.models.base import Base


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class UserGroup(Base):
    """Named group of users, shown to admins next to each user."""

    __tablename__ = "user_groups"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False, unique=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    users = relationship("User", back_populates="group")


class User(Base):
    """
    User account for session authentication and role-based access control.

    role: ADMIN or USER. Only active users receive bulk instance grants.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    username = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    email = Column(String(320), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", native_enum=False, length=16),
        nullable=False,
        default=UserRole.USER,
    )
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    group_id = Column(
        String(36),
        ForeignKey("user_groups.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    group = relationship("UserGroup", back_populates="users")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
