"""Initial schema — tarefas, users, user_claims, roles, user_roles.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tarefas",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("titulo", sa.String(100), nullable=False),
        sa.Column("concluida", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("data_vencimento", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_name", sa.String(256), nullable=False),
        sa.Column("normalized_user_name", sa.String(256), nullable=False),
        sa.Column("email", sa.String(256), nullable=False),
        sa.Column("normalized_email", sa.String(256), nullable=False),
        sa.Column("email_confirmed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("password_hash", sa.String(512), nullable=False),
        sa.Column("lockout_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("lockout_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("access_failed_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_users_normalized_user_name", "users", ["normalized_user_name"], unique=True,
    )
    op.create_index("ix_users_normalized_email", "users", ["normalized_email"])

    op.create_table(
        "user_claims",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("claim_type", sa.String(256), nullable=False),
        sa.Column("claim_value", sa.String(512), nullable=False),
    )
    op.create_index("ix_user_claims_user_id", "user_claims", ["user_id"])

    op.create_table(
        "roles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("normalized_name", sa.String(256), nullable=False, unique=True),
    )

    op.create_table(
        "user_roles",
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "role_id", UUID(as_uuid=True),
            sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("user_roles")
    op.drop_table("roles")
    op.drop_index("ix_user_claims_user_id", table_name="user_claims")
    op.drop_table("user_claims")
    op.drop_index("ix_users_normalized_email", table_name="users")
    op.drop_index("ix_users_normalized_user_name", table_name="users")
    op.drop_table("users")
    op.drop_table("tarefas")
