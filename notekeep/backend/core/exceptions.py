"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Services raise these; the HTTP layer maps them to responses.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a note or folder cannot be found for the caller."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when input is malformed."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when a call requires a session and none is active."""

    def __init__(
        self,
        message: str = "Authentication required",
        code: str = "AUTH_UNAUTHORIZED",
    ) -> None:
        super().__init__(message, code=code)


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when login fails.

    Unknown username and wrong password produce the same error.
    """

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message, code="AUTH_INVALID_CREDENTIALS")


class InvalidRecoveryError(AuthenticationError):
    """Raised when the username/recovery key pair does not match."""

    def __init__(self, message: str = "Invalid recovery credentials") -> None:
        super().__init__(message, code="AUTH_INVALID_RECOVERY")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict", code: str = "RES_CONFLICT") -> None:
        super().__init__(message, code=code)


class DuplicateUsernameError(ConflictError):
    """Raised when registering a username that is already taken."""

    def __init__(self, message: str = "Username already exists") -> None:
        super().__init__(message, code="AUTH_DUPLICATE_USERNAME")
