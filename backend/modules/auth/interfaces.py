"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import SessionData, SessionGrant


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for session operations.

    This protocol defines the contract that the auth module exposes
    to the API layer. Implementations must provide all these methods.
    """

    async def authenticate(self, token: str) -> SessionData:
        """
        Resolve a bearer token to the session it belongs to.

        The token must verify (signature, expiry, issuer), its session must
        still be in the store, and the stored subject must equal the token
        subject.

        Args:
            token: Session token from the Authorization header

        Returns:
            SessionData with customer ID and granted scopes

        Raises:
            MissingTokenError: If token is empty
            ExpiredTokenError / InvalidTokenError: If verification fails
            SessionNotFoundError: If the session expired or was revoked
            SessionMismatchError: If the stored subject differs
        """
        ...

    async def login_legacy(self, email: str, password: str) -> SessionGrant:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: If the customer is unknown or the password is wrong
            WrongAuthProviderError: If the customer registered through Google
        """
        ...

    async def login_google(self, code: Optional[str], error: Optional[str] = None) -> SessionGrant:
        """
        Complete a Google OAuth redirect, creating the customer on first sign-in.

        Raises:
            OAuthDeniedError: If Google reported an error or no code was given
            WrongAuthProviderError: If the email belongs to a password account
            ExternalServiceError: If Google could not be reached
        """
        ...

    async def get_session(self, token: str) -> SessionData:
        ...

    async def renew_session(self, token: str) -> SessionGrant:
        """
        Issue a fresh token with the same scopes.

        The old session stays valid for a short grace window so in-flight
        requests carrying it do not fail.
        """
        ...

    async def revoke_session(self, token: str) -> None:
        ...
