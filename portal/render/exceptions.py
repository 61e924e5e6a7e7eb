class RenderException(Exception):
    """Base exception for the render application."""


class EmptyRenderInputException(RenderException):
    """Raised when there is nothing to render."""


class RenderFailedException(RenderException):
    """Raised when the renderer could not produce output."""
