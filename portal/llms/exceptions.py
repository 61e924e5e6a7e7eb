class LLMException(Exception):
    """Base exception for the llms application."""


class UnsupportedLLMModelException(LLMException):
    """Raised when the configured model is not in the registry."""


class MissingAPIKeyException(LLMException):
    """Raised when no API key is configured for the provider of the selected model."""
