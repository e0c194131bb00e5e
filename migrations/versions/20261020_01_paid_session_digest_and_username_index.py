"""tie paid sessions to the source photo; case-insensitive unique usernames

Revision ID: 20261020_01
Revises: 3f1c9a7d2b10
Create Date: 2026-10-20 09:30:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261020_01"
down_revision = "3f1c9a7d2b10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("generated_images", sa.Column("source_digest", sa.String(length=64), nullable=True))
    op.create_index(
        "uq_accounts_username_lower",
        "accounts",
        [sa.text("lower(username)")],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("uq_accounts_username_lower", table_name="accounts")
    with op.batch_alter_table("generated_images") as batch_op:
        batch_op.drop_column("source_digest")
