"""PostgreSQL repository implementations."""

from commentary.persistence.repository.comment import PostgresCommentRepository

__all__ = [
    "PostgresCommentRepository",
]
