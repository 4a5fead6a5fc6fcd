"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error.

    Raised before storage is touched; the message is safe to show callers.
    """

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found or has been deleted."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ForbiddenError(DomainError):
    """Raised when an actor attempts an action they are not allowed to take."""

    def __init__(self, action: str, resource_id: str, user_id: str | None):
        self.action = action
        self.resource_id = resource_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id or 'anonymous'} is not allowed to {action} {resource_id}"
        )


class ConflictError(DomainError):
    """Raised when a mutation collides with the current state of a comment.

    Attributes:
        retryable: Whether re-running the whole operation may succeed
    """

    def __init__(self, message: str, retryable: bool = False):
        self.retryable = retryable
        super().__init__(message)


class ContentionError(ConflictError):
    """Transient store contention (serialization failure, deadlock, lock timeout)."""

    def __init__(self, message: str = "Store contention"):
        super().__init__(message, retryable=True)


class CounterIntegrityError(DomainError):
    """Raised when a reply counter update cannot be applied.

    Always aborts the surrounding transaction.
    """

    def __init__(self, parent_id: str):
        self.parent_id = parent_id
        super().__init__(f"Reply counter update matched no row for comment {parent_id}")


class DeadlineExceededError(DomainError):
    """Raised when a read operation does not finish before the caller's deadline."""

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} exceeded its deadline of {timeout}s")
