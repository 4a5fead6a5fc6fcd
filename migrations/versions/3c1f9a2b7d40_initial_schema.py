"""initial_schema

Create the comment thread schema:
- approval_state enum (pending, approved, rejected)
- Comments (threaded, unbounded depth, tombstoned instead of deleted)
- Keyset indexes for top-level, reply and moderation listings

Revision ID: 3c1f9a2b7d40
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f9a2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM type (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE approval_state AS ENUM ('pending', 'approved', 'rejected');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("content_item_id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("parent_id", sa.UUID(), nullable=True),
        sa.Column("root_id", sa.UUID(), nullable=False),
        sa.Column("depth", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "approval_state",
            postgresql.ENUM(
                "pending",
                "approved",
                "rejected",
                name="approval_state",
                create_type=False,
            ),
            server_default="pending",
            nullable=False,
        ),
        sa.Column("reply_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "total_reply_count", sa.Integer(), server_default="0", nullable=False
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["parent_id"], ["comments.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("depth >= 0", name="depth_non_negative"),
        sa.CheckConstraint("reply_count >= 0", name="reply_count_non_negative"),
        sa.CheckConstraint(
            "total_reply_count >= reply_count", name="total_covers_approved"
        ),
        sa.CheckConstraint(
            "(parent_id IS NULL AND root_id = id AND depth = 0)"
            " OR (parent_id IS NOT NULL AND depth > 0)",
            name="threading_consistent",
        ),
    )

    op.create_index(
        "idx_comments_top_level",
        "comments",
        ["content_item_id", "created_at", "id"],
        postgresql_where=sa.text("parent_id IS NULL"),
    )
    op.create_index(
        "idx_comments_children", "comments", ["parent_id", "created_at", "id"]
    )
    op.create_index(
        "idx_comments_approval_state",
        "comments",
        ["approval_state", "created_at", "id"],
    )
    op.create_index("idx_comments_root_id", "comments", ["root_id"])
    op.create_index("idx_comments_author_id", "comments", ["author_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("comments")
    op.execute("DROP TYPE IF EXISTS approval_state")
