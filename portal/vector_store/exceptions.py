class VectorStoreException(Exception):
    """Base exception for the vector store application."""


class DocumentNotFoundException(VectorStoreException):
    """Raised when a document is not found."""


class DocumentValidationException(VectorStoreException):
    """Raised when a document carries no usable content."""
