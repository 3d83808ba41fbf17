"""Initial database schema

Revision ID: 000_initial_schema
Revises:
Create Date: 2026-10-17

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "000_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the local store tables."""

    # Collection documents (users, contracts, clients, consultants, deals)
    op.create_table(
        "documents",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # Remote mirror sync ledger
    op.create_table(
        "sync_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("collection", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(64), nullable=False),
        sa.Column(
            "operation",
            sa.Enum("upsert", "delete", name="syncoperation"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("pending", "synced", "failed", "skipped", name="syncstatus"),
            nullable=False,
        ),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("collection", "entity_id", name="uq_sync_records_entity"),
    )
    op.create_index("ix_sync_records_collection", "sync_records", ["collection"])
    op.create_index("ix_sync_records_status", "sync_records", ["status"])


def downgrade() -> None:
    """Drop the local store tables."""
    op.drop_index("ix_sync_records_status", table_name="sync_records")
    op.drop_index("ix_sync_records_collection", table_name="sync_records")
    op.drop_table("sync_records")
    op.drop_table("documents")

    op.execute("DROP TYPE IF EXISTS syncstatus")
    op.execute("DROP TYPE IF EXISTS syncoperation")
