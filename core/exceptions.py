# core/exceptions.py

class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when task data is invalid (empty title, progress out of range, bad dates)."""


class NotFoundError(DomainError):
    """Raised when a task or dependency is not found."""


class BusinessRuleError(DomainError):
    """Raised when hierarchy or scheduling rules are violated (e.g., dependency cycles)."""
