class UseCaseException(Exception):
    """Base exception for use case decomposition and documentation."""


class DecompositionException(UseCaseException):
    pass


class DocumentationException(UseCaseException):
    pass


class DocumentationValidationException(DocumentationException):
    """Invalid folder or file name."""


class DocumentationFolderExistsException(DocumentationException):
    pass


class DocumentationNotFoundException(DocumentationException):
    pass


class NoArtifactsException(DocumentationException):
    pass
