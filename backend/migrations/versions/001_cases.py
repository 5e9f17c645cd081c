"""Create the cases table.

Revision ID: 001_cases
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers
revision = "001_cases"
down_revision = None
branch_labels = None
depends_on = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists("cases"):
        op.create_table(
            "cases",
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column("case_id", sa.String(36), nullable=False),
            sa.Column(
                "case_external_id",
                sa.Text,
                nullable=True,
                comment="Identifier from the originating system; dedup key",
            ),
            sa.Column("contact_name", sa.Text, nullable=False, server_default=""),
            sa.Column("phone_number", sa.Text, nullable=False, server_default=""),
            sa.Column("pet_name", sa.Text, nullable=False, server_default=""),
            sa.Column("pet_species", sa.Text, nullable=False, server_default=""),
            sa.Column("pet_breed", sa.Text, nullable=False, server_default=""),
            sa.Column("initial_request", sa.Text, nullable=False, server_default=""),
            sa.Column("source_system", sa.Text, nullable=False, server_default=""),
            sa.Column(
                "status",
                sa.Text,
                nullable=False,
                server_default="open",
                comment="open, in_progress, closed",
            ),
            sa.Column(
                "outcome",
                sa.Text,
                nullable=False,
                server_default="",
                comment="pet_kept_in_home, referred_to_vet, surrendered, returned_to_owner, other",
            ),
            sa.Column("notes", sa.Text, nullable=False, server_default=""),
            sa.Column("deleted", sa.Boolean, nullable=False, server_default=sa.false()),
            sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
            sa.UniqueConstraint("case_id", name="uq_cases_case_id"),
            sa.UniqueConstraint("case_external_id", name="uq_cases_case_external_id"),
        )

    op.create_index("ix_cases_created_at", "cases", ["created_at"], if_not_exists=True)
    op.create_index("idx_cases_deleted", "cases", ["deleted"], if_not_exists=True)


def downgrade() -> None:
    op.drop_index("idx_cases_deleted", table_name="cases", if_exists=True)
    op.drop_index("ix_cases_created_at", table_name="cases", if_exists=True)
    op.drop_table("cases")
