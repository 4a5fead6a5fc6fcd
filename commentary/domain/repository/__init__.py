"""Repository interfaces for the comment thread domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from commentary.domain.repository.comment import CommentRepository, CommentSlice

__all__ = [
    "CommentRepository",
    "CommentSlice",
]
