"""Domain layer DI providers."""

from dishka import Scope, provide

from commentary.config import AuthSettings, ThreadSettings
from commentary.domain.repository import CommentRepository
from commentary.domain.service import (
    ContentDirectory,
    IdentityService,
    ModerationGate,
    ReplyCounter,
    ThreadPaginator,
    ThreadService,
)
from commentary.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_moderation_gate(self) -> ModerationGate:
        """Provide moderation policy (stateless)."""
        return ModerationGate()

    @provide
    def get_identity_service(self, auth_settings: AuthSettings) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(auth_settings=auth_settings)

    @provide
    def get_reply_counter(
        self, comment_repository: CommentRepository, moderation_gate: ModerationGate
    ) -> ReplyCounter:
        """Provide reply counter domain service."""
        return ReplyCounter(
            comment_repository=comment_repository, moderation_gate=moderation_gate
        )

    @provide
    def get_thread_paginator(
        self,
        comment_repository: CommentRepository,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> ThreadPaginator:
        """Provide thread paginator domain service."""
        return ThreadPaginator(
            comment_repository=comment_repository,
            moderation_gate=moderation_gate,
            max_page_size=thread_settings.max_page_size,
        )

    @provide
    def get_thread_service(
        self,
        comment_repository: CommentRepository,
        moderation_gate: ModerationGate,
        reply_counter: ReplyCounter,
        thread_paginator: ThreadPaginator,
        content_directory: ContentDirectory,
        thread_settings: ThreadSettings,
    ) -> ThreadService:
        """Provide comment thread domain service."""
        return ThreadService(
            comment_repository=comment_repository,
            moderation_gate=moderation_gate,
            reply_counter=reply_counter,
            thread_paginator=thread_paginator,
            content_directory=content_directory,
            thread_settings=thread_settings,
        )
