"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import AuthenticationError, AuthorizationError, ConflictError


class InvalidTokenError(AuthenticationError):
    """Raised when a session token is invalid or malformed."""

    def __init__(self, message: str = "Invalid authentication token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a session token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class SessionNotFoundError(AuthenticationError):
    """Raised when a token is valid but its session is gone from the store."""

    def __init__(self):
        super().__init__("Session not found or expired", code="SESSION_NOT_FOUND")


class SessionMismatchError(AuthenticationError):
    """Raised when the token subject and the stored session subject differ."""

    def __init__(self):
        super().__init__("Session does not belong to token subject", code="SESSION_MISMATCH")


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match."""

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class OAuthDeniedError(AuthenticationError):
    """Raised when the OAuth provider redirects back with an error."""

    def __init__(self, reason: str):
        super().__init__(
            "Authorization was denied by the identity provider",
            code="OAUTH_DENIED",
            details={"reason": reason},
        )


class WrongAuthProviderError(ConflictError):
    """Raised when a customer signs in through a provider they did not register with."""

    def __init__(self, expected: str):
        super().__init__(
            f"This account signs in with {expected}",
            code=f"ONLY_{expected}_PROVIDER",
            details={"provider": expected},
        )


class InsufficientScopesError(AuthorizationError):
    """Raised when a session lacks the scopes an operation requires."""

    def __init__(self, required: list[str]):
        super().__init__(
            "Session scopes do not allow this action",
            code="INSUFFICIENT_SCOPES",
            details={"required": required},
        )
