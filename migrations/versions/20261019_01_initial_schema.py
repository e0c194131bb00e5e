"""initial schema: accounts, wallet ledger, recharges, gallery and support chat

Revision ID: 3f1c9a7d2b10
Revises: 
Create Date: 2026-10-19 10:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f1c9a7d2b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("avatar", sa.String(length=500)),
        sa.Column("balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("reference_id", sa.String(length=36)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_wallet_transactions_account_id", "wallet_transactions", ["account_id"])
    op.create_index("ix_wallet_transactions_reference_id", "wallet_transactions", ["reference_id"])
    op.create_index("ix_wallet_transactions_created_at", "wallet_transactions", ["created_at"])

    op.create_table(
        "recharge_requests",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("user_name", sa.String(length=100), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("method", sa.String(length=20), nullable=False, server_default="bkash"),
        sa.Column("sender_number", sa.String(length=30), nullable=False),
        sa.Column("trx_id", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_recharge_requests_account_id", "recharge_requests", ["account_id"])
    op.create_index("ix_recharge_requests_trx_id", "recharge_requests", ["trx_id"])
    op.create_index("ix_recharge_requests_status", "recharge_requests", ["status"])
    op.create_index("ix_recharge_requests_created_at", "recharge_requests", ["created_at"])

    op.create_table(
        "generated_images",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("account_id", sa.String(length=36), sa.ForeignKey("accounts.id"), nullable=False),
        sa.Column("user_name", sa.String(length=100), nullable=False),
        sa.Column("image_data", sa.Text(), nullable=False),
        sa.Column("settings_summary", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("session_key", sa.String(length=64)),
        sa.Column("charged", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("width", sa.Integer()),
        sa.Column("height", sa.Integer()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_generated_images_account_id", "generated_images", ["account_id"])
    op.create_index("ix_generated_images_session_key", "generated_images", ["session_key"])
    op.create_index("ix_generated_images_created_at", "generated_images", ["created_at"])

    op.create_table(
        "support_messages",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("conversation_key", sa.String(length=36), nullable=False),
        sa.Column("sender_name", sa.String(length=100), nullable=False),
        sa.Column("text", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_from_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("attachment_type", sa.String(length=10)),
        sa.Column("attachment_data", sa.Text()),
        sa.Column("status", sa.String(length=10), nullable=False, server_default="sent"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_support_messages_conversation_key", "support_messages", ["conversation_key"])
    op.create_index("ix_support_messages_created_at", "support_messages", ["created_at"])


def downgrade() -> None:
    op.drop_table("support_messages")
    op.drop_table("generated_images")
    op.drop_table("recharge_requests")
    op.drop_table("wallet_transactions")
    op.drop_table("accounts")
