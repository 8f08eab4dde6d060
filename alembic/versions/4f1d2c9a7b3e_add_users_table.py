"""add users table

Revision ID: 4f1d2c9a7b3e
Revises:
Create Date: 2026-09-28

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4f1d2c9a7b3e"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("privy_id", sa.String(length=128), nullable=False),
        sa.Column("email_address", sa.String(length=320), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_type", sa.String(length=16), server_default="default", nullable=False),
        sa.Column("avatar", sa.String(length=512), nullable=True),
        sa.Column("wallet_address", sa.String(length=128), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_privy_id"), "users", ["privy_id"], unique=True)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email_address"), "users", ["email_address"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_users_email_address"), table_name="users")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_privy_id"), table_name="users")
    op.drop_table("users")
