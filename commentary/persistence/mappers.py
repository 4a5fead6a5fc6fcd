"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from commentary.domain.model import Comment
from commentary.domain.value import ApprovalState, CommentId, ContentItemId, UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    parent_id = row.get("parent_id")
    return Comment(
        id=CommentId(_uuid(row["id"])),
        content_item_id=ContentItemId(_uuid(row["content_item_id"])),
        author_id=UserId(_uuid(row["author_id"])),
        body=row["body"],
        parent_id=CommentId(_uuid(parent_id)) if parent_id else None,
        root_id=CommentId(_uuid(row["root_id"])),
        depth=row["depth"],
        approval_state=ApprovalState(row["approval_state"]),
        reply_count=row["reply_count"],
        total_reply_count=row["total_reply_count"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion
    """
    data = comment.model_dump()
    data["approval_state"] = comment.approval_state.value
    return data
