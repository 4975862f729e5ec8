"""Service instances, per-user instance abilities and resource usage logs.

Revision ID: 20260301100000
Revises: 20260301000000
Create Date: 2026-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "20260301100000"
down_revision: Union[str, None] = "20260301000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "service_instances",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=64), nullable=False, server_default="generic"),
        sa.Column("url", sa.String(length=2048), nullable=True),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "user_instance_abilities",
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("instance_id", sa.String(length=36), nullable=False),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("can_use", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["instance_id"], ["service_instances.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "instance_id"),
    )
    op.create_index(
        op.f("ix_user_instance_abilities_token"),
        "user_instance_abilities",
        ["token"],
        unique=True,
    )
    op.create_index(
        op.f("ix_user_instance_abilities_instance_id"),
        "user_instance_abilities",
        ["instance_id"],
        unique=False,
    )

    op.create_table(
        "resource_usage_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("instance_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=True),
        sa.Column("type", sa.String(length=64), nullable=False, server_default="request"),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_resource_usage_logs_instance_id"), "resource_usage_logs", ["instance_id"], unique=False)
    op.create_index(op.f("ix_resource_usage_logs_user_id"), "resource_usage_logs", ["user_id"], unique=False)
    op.create_index(op.f("ix_resource_usage_logs_created_at"), "resource_usage_logs", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_resource_usage_logs_created_at"), table_name="resource_usage_logs")
    op.drop_index(op.f("ix_resource_usage_logs_user_id"), table_name="resource_usage_logs")
    op.drop_index(op.f("ix_resource_usage_logs_instance_id"), table_name="resource_usage_logs")
    op.drop_table("resource_usage_logs")
    op.drop_index(op.f("ix_user_instance_abilities_instance_id"), table_name="user_instance_abilities")
    op.drop_index(op.f("ix_user_instance_abilities_token"), table_name="user_instance_abilities")
    op.drop_table("user_instance_abilities")
    op.drop_table("service_instances")
