class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class PunchRejectedError(ValidationError):
    """Raised when a punch cannot be recorded for the requested day."""

    def __init__(self, message: str, *, reason: str):
        super().__init__(message)
        self.reason = reason


class StoreUnavailableError(DomainError):
    """Raised when the backing store cannot be reached.

    Every write in this package is an upsert or an existence-guarded insert,
    so callers may retry the whole operation.
    """


class DuplicateLedgerEntryError(DomainError):
    """Raised when a ledger append hits the store's uniqueness key."""
