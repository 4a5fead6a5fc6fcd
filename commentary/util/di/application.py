"""Application layer DI providers."""

from dishka import Scope, provide

from commentary.application.usecase.comment import (
    EditCommentUseCase,
    GetModerationQueueUseCase,
    ListRepliesUseCase,
    ListTopLevelCommentsUseCase,
    ModerateCommentUseCase,
    RemoveCommentUseCase,
    SubmitCommentUseCase,
)
from commentary.config import ThreadSettings
from commentary.domain.service import IdentityService, ModerationGate, ThreadService
from commentary.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_submit_comment_use_case(
        self,
        thread_service: ThreadService,
        identity_service: IdentityService,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> SubmitCommentUseCase:
        """Provide submit comment use case."""
        return SubmitCommentUseCase(
            thread_service=thread_service,
            identity_service=identity_service,
            moderation_gate=moderation_gate,
            thread_settings=thread_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_remove_comment_use_case(
        self, thread_service: ThreadService, identity_service: IdentityService
    ) -> RemoveCommentUseCase:
        """Provide remove comment use case."""
        return RemoveCommentUseCase(
            thread_service=thread_service, identity_service=identity_service
        )

    @provide(scope=Scope.REQUEST)
    def get_edit_comment_use_case(
        self,
        thread_service: ThreadService,
        identity_service: IdentityService,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> EditCommentUseCase:
        """Provide edit comment use case."""
        return EditCommentUseCase(
            thread_service=thread_service,
            identity_service=identity_service,
            moderation_gate=moderation_gate,
            thread_settings=thread_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_moderate_comment_use_case(
        self,
        thread_service: ThreadService,
        identity_service: IdentityService,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> ModerateCommentUseCase:
        """Provide moderate comment use case."""
        return ModerateCommentUseCase(
            thread_service=thread_service,
            identity_service=identity_service,
            moderation_gate=moderation_gate,
            thread_settings=thread_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_top_level_comments_use_case(
        self,
        thread_service: ThreadService,
        identity_service: IdentityService,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> ListTopLevelCommentsUseCase:
        """Provide list top-level comments use case."""
        return ListTopLevelCommentsUseCase(
            thread_service=thread_service,
            identity_service=identity_service,
            moderation_gate=moderation_gate,
            thread_settings=thread_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_replies_use_case(
        self,
        thread_service: ThreadService,
        identity_service: IdentityService,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> ListRepliesUseCase:
        """Provide list replies use case."""
        return ListRepliesUseCase(
            thread_service=thread_service,
            identity_service=identity_service,
            moderation_gate=moderation_gate,
            thread_settings=thread_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_moderation_queue_use_case(
        self,
        thread_service: ThreadService,
        identity_service: IdentityService,
        moderation_gate: ModerationGate,
        thread_settings: ThreadSettings,
    ) -> GetModerationQueueUseCase:
        """Provide moderation queue use case."""
        return GetModerationQueueUseCase(
            thread_service=thread_service,
            identity_service=identity_service,
            moderation_gate=moderation_gate,
            thread_settings=thread_settings,
        )
