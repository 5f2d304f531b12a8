"""create profile, ledger and message thread tables

Revision ID: 3f9c2a71d0b4
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c2a71d0b4"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("member_name", sa.String(length=100), nullable=False),
        sa.Column("class_period", sa.String(length=50)),
        sa.Column("teacher_name", sa.String(length=100)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_profiles_member_name", "profiles", ["member_name"], unique=True)
    op.create_index("ix_profiles_teacher_name", "profiles", ["teacher_name"])

    op.create_table(
        "ledger_accounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("profile_id", sa.Integer(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("account_holder", sa.String(length=100), nullable=False),
        sa.Column("account_type", sa.String(length=20), nullable=False),
        sa.Column("ledger", sa.String(length=20), nullable=False, server_default="live"),
        sa.Column("balance_total", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("transactions", sa.JSON(), nullable=False),
        sa.Column("bills", sa.JSON(), nullable=False),
        sa.Column("payments", sa.JSON(), nullable=False),
        sa.Column("movements_dates", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("account_holder", "account_type", "ledger", name="uq_ledger_accounts_holder_type"),
    )
    op.create_index("ix_ledger_accounts_profile_id", "ledger_accounts", ["profile_id"])
    op.create_index("ix_ledger_accounts_account_holder", "ledger_accounts", ["account_holder"])

    op.create_table(
        "message_threads",
        sa.Column("thread_id", sa.String(length=255), primary_key=True),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="private"),
        sa.Column("participants", sa.JSON(), nullable=False),
        sa.Column("messages", sa.JSON(), nullable=False),
        sa.Column("last_message_timestamp", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "thread_participants",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("thread_id", sa.String(length=255), sa.ForeignKey("message_threads.thread_id"), nullable=False),
        sa.Column("identity", sa.String(length=255), nullable=False),
    )
    op.create_index("ix_thread_participants_thread_id", "thread_participants", ["thread_id"])
    op.create_index("ix_thread_participants_identity", "thread_participants", ["identity"])


def downgrade() -> None:
    op.drop_index("ix_thread_participants_identity", table_name="thread_participants")
    op.drop_index("ix_thread_participants_thread_id", table_name="thread_participants")
    op.drop_table("thread_participants")
    op.drop_table("message_threads")
    op.drop_index("ix_ledger_accounts_account_holder", table_name="ledger_accounts")
    op.drop_index("ix_ledger_accounts_profile_id", table_name="ledger_accounts")
    op.drop_table("ledger_accounts")
    op.drop_index("ix_profiles_teacher_name", table_name="profiles")
    op.drop_index("ix_profiles_member_name", table_name="profiles")
    op.drop_table("profiles")
