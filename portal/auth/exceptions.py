class AuthException(Exception):
    """Base exception for authentication and user management."""


class InvalidCredentialsException(AuthException):
    """Raised when username/password do not match an active, enabled user."""


class InvalidTokenException(AuthException):
    """Raised when a bearer token is missing, malformed or expired."""


class UserValidationException(AuthException):
    """Raised when user input (username, password) breaks the validation rules."""


class UserNotFoundException(AuthException):
    """Raised when a user is not found."""


class UserAlreadyExistsException(AuthException):
    """Raised when an active user with the same username already exists."""


class UserStateException(AuthException):
    """Raised when a user is not in the state an operation requires."""
