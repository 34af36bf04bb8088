class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee, request, advance or bucket does not exist."""


class ConflictError(DomainError):
    """Raised when the stored state no longer allows the requested change."""


class TransactionError(DomainError):
    """Raised when the store fails part-way through a multi-step mutation.

    The transaction has been rolled back; the original driver error is chained.
    """
