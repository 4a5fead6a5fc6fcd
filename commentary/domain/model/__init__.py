"""Domain model entities for comment threads."""

from commentary.domain.model.comment import Comment
from commentary.domain.model.viewer import Viewer

__all__ = [
    "Comment",
    "Viewer",
]
