"""Create team member and activity log tables.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from rosterlink.adapters.sqlalchemy.tables import UTCDateTime

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "organization_team_members",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(), nullable=False, server_default=""),
        sa.Column("punch_id", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("external_id", sa.String(), nullable=True),
        sa.Column("external_source", sa.String(), nullable=True),
        sa.Column("external_data", sa.JSON(), nullable=True),
        sa.Column("last_synced_at", UTCDateTime(), nullable=True),
        sa.Column("created_at", UTCDateTime(), nullable=True, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_organization_team_members"),
    )
    op.create_index(
        "ix_team_member_org_name",
        "organization_team_members",
        ["organization_id", "last_name", "first_name"],
    )
    op.create_index(
        "ix_team_member_external",
        "organization_team_members",
        ["external_source", "external_id"],
    )
    op.create_table(
        "activity_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("organization_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("activity_type", sa.String(), nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_activity_log"),
    )
    op.create_index(
        "ix_activity_log_org_created",
        "activity_log",
        ["organization_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_activity_log_org_created", table_name="activity_log")
    op.drop_table("activity_log")
    op.drop_index("ix_team_member_external", table_name="organization_team_members")
    op.drop_index("ix_team_member_org_name", table_name="organization_team_members")
    op.drop_table("organization_team_members")
