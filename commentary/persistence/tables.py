"""SQLAlchemy table definitions for comment threads.

These table definitions match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# COMMENTS TABLE (Threaded, moderated)
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True),
    # Owned by the content service, so no foreign key
    Column("content_item_id", UUID, nullable=False),
    Column("author_id", UUID, nullable=False),
    Column("body", Text, nullable=False),
    # Rows are tombstoned, never removed, so a parent always outlives its replies
    Column(
        "parent_id", UUID, ForeignKey("comments.id", ondelete="RESTRICT"), nullable=True
    ),
    Column("root_id", UUID, nullable=False),
    Column("depth", Integer, nullable=False, server_default="0"),
    Column(
        "approval_state",
        Enum("pending", "approved", "rejected", name="approval_state", create_type=False),
        nullable=False,
        server_default="pending",
    ),
    Column("reply_count", Integer, nullable=False, server_default="0"),
    Column("total_reply_count", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("depth >= 0", name="depth_non_negative"),
    CheckConstraint("reply_count >= 0", name="reply_count_non_negative"),
    CheckConstraint("total_reply_count >= reply_count", name="total_covers_approved"),
    CheckConstraint(
        "(parent_id IS NULL AND root_id = id AND depth = 0)"
        " OR (parent_id IS NOT NULL AND depth > 0)",
        name="threading_consistent",
    ),
)

# Keyset indexes, one per listing order
Index(
    "idx_comments_top_level",
    comments_table.c.content_item_id,
    comments_table.c.created_at,
    comments_table.c.id,
    postgresql_where=comments_table.c.parent_id.is_(None),
)
Index(
    "idx_comments_children",
    comments_table.c.parent_id,
    comments_table.c.created_at,
    comments_table.c.id,
)
Index(
    "idx_comments_approval_state",
    comments_table.c.approval_state,
    comments_table.c.created_at,
    comments_table.c.id,
)
Index("idx_comments_root_id", comments_table.c.root_id)
Index("idx_comments_author_id", comments_table.c.author_id)
