"""
Authentication module.

Handles session tokens, scopes, the Redis session store and Google sign-in.

Public API:
- IAuthService: Interface for session operations
- SessionScope / ScopeSet: Authorization scopes
- SessionData, SessionGrant, TokenClaims: Session models
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .scopes import ScopeSet, SessionScope
from .models import GoogleUser, LegacyLoginRequest, SessionData, SessionGrant, TokenClaims
from .exceptions import (
    ExpiredTokenError,
    InsufficientScopesError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    OAuthDeniedError,
    SessionMismatchError,
    SessionNotFoundError,
    WrongAuthProviderError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Scopes
    "ScopeSet",
    "SessionScope",
    # Models
    "GoogleUser",
    "LegacyLoginRequest",
    "SessionData",
    "SessionGrant",
    "TokenClaims",
    # Exceptions
    "ExpiredTokenError",
    "InsufficientScopesError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingTokenError",
    "OAuthDeniedError",
    "SessionMismatchError",
    "SessionNotFoundError",
    "WrongAuthProviderError",
]
