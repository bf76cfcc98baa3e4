class DomainError(Exception):
    """Base exception for attendance rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates attendance rules."""
