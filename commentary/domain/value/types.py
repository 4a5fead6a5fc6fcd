"""Domain value objects for comment threads.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import base64
import json
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import field_validator

from commentary.domain.error import ValidationError
from commentary.domain.value.common import ValueObject


class ApprovalState(str, Enum):
    """Moderation state of a comment.

    Only approved comments are publicly visible and counted as replies.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Role(str, Enum):
    """Role of the viewer or actor, as resolved by the identity provider."""

    ANONYMOUS = "anonymous"
    USER = "user"
    MODERATOR = "moderator"


class ModerationDecision(str, Enum):
    """Decision a moderator can take on a pending comment."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_state(self) -> ApprovalState:
        """Approval state the decision moves a comment into."""
        if self is ModerationDecision.APPROVE:
            return ApprovalState.APPROVED
        return ApprovalState.REJECTED


class Cursor(ValueObject):
    """Keyset pagination position.

    Encodes the ordering key (created_at, id) of the last row a caller has
    seen. The next page starts strictly after this key, so rows inserted
    before the boundary between requests are never re-returned or skipped.
    """

    created_at: datetime
    comment_id: UUID

    @field_validator("created_at")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        """Cursor timestamps must be timezone-aware to compare with stored rows."""
        if v.tzinfo is None:
            raise ValueError("Cursor timestamp must be timezone-aware")
        return v

    @property
    def key(self) -> tuple[datetime, UUID]:
        """Ordering key as a tuple."""
        return (self.created_at, self.comment_id)

    def encode(self) -> str:
        """Encode into an opaque URL-safe token."""
        data = {
            "created_at": self.created_at.isoformat(),
            "comment_id": str(self.comment_id),
        }
        return base64.urlsafe_b64encode(json.dumps(data).encode()).decode()

    @classmethod
    def decode(cls, token: str) -> "Cursor":
        """Decode an opaque token produced by encode().

        Raises:
            ValidationError: If the token is not a valid cursor
        """
        try:
            data = json.loads(base64.urlsafe_b64decode(token.encode()).decode())
            return cls(
                created_at=datetime.fromisoformat(data["created_at"]),
                comment_id=UUID(data["comment_id"]),
            )
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Malformed cursor")
