"""create admin_accounts, applicants and applicant_interests

Revision ID: a7c31e90b2d4
Revises:
Create Date: 2026-10-19 09:00:00.000000

Initial schema:
- admin_accounts: dashboard logins (email unique, bcrypt hash)
- applicants: volunteer submissions (email unique, reviewed flag)
- applicant_interests: one row per (applicant, interest) pair

Enums are stored as VARCHAR with CHECK constraints (native_enum=False on
the models) so the value list can change without ALTER TYPE.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a7c31e90b2d4"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

INTERESTS = ("Education", "Tech", "Outreach", "Healthcare", "Environment", "Community Service")
AVAILABILITY = ("Full-time", "Part-time", "Weekends")


def upgrade() -> None:
    """Create the three tables and their indexes."""
    op.create_table(
        "admin_accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admin_accounts_email", "admin_accounts", ["email"], unique=True)

    op.create_table(
        "applicants",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column(
            "availability",
            sa.Enum(*AVAILABILITY, name="availability", native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column("bio", sa.String(length=300), nullable=True),
        sa.Column("reviewed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_applicants_reviewed", "applicants", ["reviewed"])
    op.create_index("ix_applicants_created_at", "applicants", ["created_at"])

    op.create_table(
        "applicant_interests",
        sa.Column("applicant_id", sa.Uuid(), nullable=False),
        sa.Column(
            "interest",
            sa.Enum(*INTERESTS, name="interest", native_enum=False, length=32),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["applicant_id"], ["applicants.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("applicant_id", "interest"),
    )
    op.create_index("ix_applicant_interests_interest", "applicant_interests", ["interest"])


def downgrade() -> None:
    """Drop the tables in dependency order."""
    op.drop_index("ix_applicant_interests_interest", table_name="applicant_interests")
    op.drop_table("applicant_interests")

    op.drop_index("ix_applicants_created_at", table_name="applicants")
    op.drop_index("ix_applicants_reviewed", table_name="applicants")
    op.drop_table("applicants")

    op.drop_index("ix_admin_accounts_email", table_name="admin_accounts")
    op.drop_table("admin_accounts")
