"""ORM model for externally hosted service instances managed by the panel."""

from sqlalchemy import JSON, Boolean, Column, DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB

from app.core.security import generate_id
from app.models.base import Base

# JSONB on PostgreSQL, plain JSON on other dialects (sqlite in tests).
JsonPayload = JSON().with_variant(JSONB(), "postgresql")


class ServiceInstance(Base):
    """
    A hosted resource whose access is mediated through per-user grants.

    ``data`` is an opaque configuration payload owned by the instance itself.
    """

    __tablename__ = "service_instances"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(64), nullable=False, default="generic")
    url = Column(String(2048), nullable=True)
    is_enabled = Column(Boolean, nullable=False, default=True)
    data = Column(JsonPayload, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
