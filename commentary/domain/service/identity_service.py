"""Identity resolution domain service."""

from uuid import UUID

import logfire

from commentary.config import AuthSettings
from commentary.domain.model import Viewer
from commentary.domain.value import Role, UserId
from commentary.util.jwt import JWTError, create_token, verify_token

from .base import Service


class IdentityService(Service):
    """Resolves the viewer behind an auth token.

    Authentication itself happens upstream; this service only decodes the
    signed identity the upstream issued.
    """

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize identity service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def issue_token(self, user_id: UserId, role: Role) -> str:
        """Issue a signed token for a user (used by tooling and tests).

        Args:
            user_id: User ID
            role: Role of the user

        Returns:
            JWT token string
        """
        with logfire.span(
            "identity_service.issue_token", user_id=str(user_id), role=role.value
        ):
            return create_token(str(user_id), role.value, self.auth_settings)

    def resolve_viewer(self, token: str | None) -> Viewer:
        """Resolve the viewer for a token without raising.

        Missing, expired or invalid tokens resolve to the anonymous viewer.

        Args:
            token: JWT token string (optional)

        Returns:
            Resolved viewer
        """
        if not token:
            return Viewer.anonymous()

        with logfire.span("identity_service.resolve_viewer"):
            try:
                payload = verify_token(token, self.auth_settings)
                role = Role(payload.role)
                if role is Role.ANONYMOUS:
                    return Viewer.anonymous()
                viewer = Viewer(id=UserId(UUID(payload.user_id)), role=role)
            except (JWTError, ValueError) as e:
                logfire.debug(
                    "Token rejected, treating as anonymous", error=str(e)
                )
                return Viewer.anonymous()

            logfire.info(
                "Viewer resolved", user_id=str(viewer.id), role=viewer.role.value
            )
            return viewer
