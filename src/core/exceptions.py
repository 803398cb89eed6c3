class DomainError(Exception):
    """Base class for domain-specific errors."""

    pass


class MeetingValidationError(DomainError):
    """Raised when caller input (transcript, question) is missing or blank.

    Checked before any generation call, so it never costs a model request.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field.capitalize()} is required")
