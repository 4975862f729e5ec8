"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.resource_usage_log import ResourceUsageLog
from app.models.service_instance import ServiceInstance
from app.models.session import UserSession
from app.models.user import User, UserGroup, UserRole
from app.models.user_instance_ability import UserInstanceAbility

__all__ = [
    "Base",
    "ResourceUsageLog",
    "ServiceInstance",
    "User",
    "UserGroup",
    "UserInstanceAbility",
    "UserRole",
    "UserSession",
]
