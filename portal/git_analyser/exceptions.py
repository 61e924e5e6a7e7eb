class GitAnalyserException(Exception):
    """Base exception for the git analyser domain."""


class GitOperationException(GitAnalyserException):
    """Raised when a git command exits with an error."""
