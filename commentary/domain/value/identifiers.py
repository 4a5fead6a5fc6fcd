"""Strongly typed identifiers for comment thread entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Owned by this service
CommentId = NewType("CommentId", UUID)

# Owned by collaborators (content service, identity provider)
ContentItemId = NewType("ContentItemId", UUID)
UserId = NewType("UserId", UUID)
