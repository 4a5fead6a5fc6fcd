"""Viewer value passed in from the identity collaborator.

The engine never authenticates anyone; it only consumes the identity and
role an upstream resolver produced.
"""

from typing import Optional

from pydantic import model_validator

from commentary.domain.model.common import DomainModel
from commentary.domain.value import Role, UserId


class Viewer(DomainModel):
    """Identity of whoever is reading or acting on a thread."""

    id: Optional[UserId] = None
    role: Role = Role.ANONYMOUS

    @model_validator(mode="after")
    def validate_identity(self) -> "Viewer":
        """Anonymous viewers have no id; everybody else must have one."""
        if self.role is Role.ANONYMOUS and self.id is not None:
            raise ValueError("Anonymous viewers cannot carry a user id")
        if self.role is not Role.ANONYMOUS and self.id is None:
            raise ValueError(f"{self.role.value} viewers must carry a user id")
        return self

    @classmethod
    def anonymous(cls) -> "Viewer":
        """The viewer used when no identity could be resolved."""
        return cls(id=None, role=Role.ANONYMOUS)

    @property
    def is_moderator(self) -> bool:
        return self.role is Role.MODERATOR

    @property
    def is_anonymous(self) -> bool:
        return self.role is Role.ANONYMOUS
