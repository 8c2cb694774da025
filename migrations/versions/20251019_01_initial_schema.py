"""Initial club portal schema."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20251019_01"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    )


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone_number", sa.String(length=50), nullable=True),
        sa.Column("academic_year", sa.String(length=50), nullable=True),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("role", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_members_email", "members", ["email"], unique=True)
    op.create_index("ix_members_status", "members", ["status"], unique=False)

    for table in ("events", "meetings"):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("title", sa.String(length=200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("location", sa.String(length=200), nullable=True),
            sa.Column("date", sa.DateTime(), nullable=False),
            sa.Column("time", sa.String(length=5), nullable=True),
            _timestamp("created_at"),
            _timestamp("updated_at"),
        )
        op.create_index(f"ix_{table}_date", table, ["date"], unique=False)

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("item", sa.String(length=200), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        _timestamp("created_at"),
        sa.CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )
    op.create_index("ix_expenses_category", "expenses", ["category"], unique=False)
    op.create_index("ix_expenses_date", "expenses", ["date"], unique=False)

    op.create_table(
        "gallery",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=200), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=False),
        _timestamp("created_at"),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
    )
    op.create_index(
        "ix_notifications_unread_recent",
        "notifications",
        ["is_read", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_notifications_unread_recent", table_name="notifications")
    op.drop_table("notifications")
    op.drop_table("gallery")
    op.drop_index("ix_expenses_date", table_name="expenses")
    op.drop_index("ix_expenses_category", table_name="expenses")
    op.drop_table("expenses")
    for table in ("meetings", "events"):
        op.drop_index(f"ix_{table}_date", table_name=table)
        op.drop_table(table)
    op.drop_index("ix_members_status", table_name="members")
    op.drop_index("ix_members_email", table_name="members")
    op.drop_table("members")
