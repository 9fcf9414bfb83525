"""Add ai_performance table

Revision ID: add_ai_performance
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "add_ai_performance"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "ai_performance",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("conversation_id", sa.String(255), nullable=False),
        sa.Column("patient_id", sa.String(255), nullable=True),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("response", sa.Text(), nullable=False),
        sa.Column("response_time", sa.Float(), nullable=False),
        sa.Column("satisfaction_score", sa.Float(), nullable=True),
        sa.Column(
            "language", sa.String(64), nullable=False, server_default="English"
        ),
        sa.Column("source", sa.String(32), nullable=False, server_default="whatsapp"),
        sa.Column(
            "resolved", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "booking_conversion",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("client_id", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_ai_performance_client_id", "ai_performance", ["client_id"], unique=False
    )
    op.create_index(
        "ix_ai_performance_client_id_created",
        "ai_performance",
        ["client_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_ai_performance_client_id_created", table_name="ai_performance")
    op.drop_index("ix_ai_performance_client_id", table_name="ai_performance")
    op.drop_table("ai_performance")
