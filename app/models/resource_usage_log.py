"""ORM model for append-only resource usage events reported per service instance."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base
from app.models.service_instance import JsonPayload


class ResourceUsageLog(Base):
    """
    Usage event written by service instances.

    Not a foreign key on instance_id: logs may be kept after their instance
    is deleted.
    """

    __tablename__ = "resource_usage_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    instance_id = Column(String(36), nullable=False, index=True)
    user_id = Column(String(36), nullable=True, index=True)
    type = Column(String(64), nullable=False, default="request")
    data = Column(JsonPayload, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
