class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"
    transient = False


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class InvalidAmount(ValidationError):
    """Raised when a bonus amount is not a positive integer."""

    kind = "invalid_amount"


class InvalidPurchase(ValidationError):
    """Raised when a purchase has no item or a non-positive cost."""

    kind = "invalid_purchase"


class NotFound(DomainError):
    """Raised when a record is absent or owned by another teacher."""

    kind = "not_found"


class NotEnrolled(DomainError):
    """Raised on check-in for a group the student is not a member of."""

    kind = "not_enrolled"


class AlreadyCheckedIn(DomainError):
    """Raised on a second same-day check-in for the same subject."""

    kind = "already_checked_in"


class InsufficientTokens(DomainError):
    """Raised when a purchase costs more than the student's balance."""

    kind = "insufficient_tokens"


class DuplicateEntity(DomainError):
    """Raised when a unique constraint rejects a write."""

    kind = "duplicate_entity"


class PersistenceError(DomainError):
    """Raised when the storage layer fails. Reads may be retried."""

    kind = "persistence_error"
    transient = True


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "authentication_error"
