"""Mock persistence providers for testing."""

from dishka import Scope, provide

from commentary.domain.repository import CommentRepository
from commentary.persistence.repository.inmemory import InMemoryCommentRepository
from commentary.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    APP scope keeps one repository per container, so state survives across
    the requests of an e2e test; each test builds its own container.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_comment_repository(self) -> CommentRepository:
        """Provide in-memory comment repository."""
        return InMemoryCommentRepository()
