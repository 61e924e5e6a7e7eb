class PromptException(Exception):
    """Base exception for prompts application."""


class PromptNotFoundException(PromptException):
    """Raised when a prompt is not found."""


class PromptValidationException(PromptException):
    """Raised when a prompt update carries invalid data."""
