"""Usage log store: append-only events per service instance."""

from sqlalchemy.orm import Session

from app.models import ResourceUsageLog


def delete_for_instance(db: Session, instance_id: str) -> int:
    """Delete every usage log row of the instance. Caller owns the transaction."""
    return (
        db.query(ResourceUsageLog)
        .filter(ResourceUsageLog.instance_id == instance_id)
        .delete(synchronize_session=False)
    )


def list_for_instance(db: Session, instance_id: str, limit: int = 100) -> list[ResourceUsageLog]:
    """Most recent usage events of an instance, newest first."""
    return (
        db.query(ResourceUsageLog)
        .filter(ResourceUsageLog.instance_id == instance_id)
        .order_by(ResourceUsageLog.created_at.desc(), ResourceUsageLog.id.desc())
        .limit(limit)
        .all()
    )
