"""
Session authentication dependencies.

Resolves the bearer token of a request to a SessionData and enforces the
scopes an endpoint declares.
"""

from typing import Callable, Optional

from fastapi import Depends, Header

from modules.auth.exceptions import InsufficientScopesError, MissingTokenError
from modules.auth.interfaces import IAuthService
from modules.auth.models import SessionData
from modules.auth.scopes import SessionScope

from ..dependencies import get_auth_service

BEARER_SCHEME = "bearer"


def extract_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header.

    The "Bearer " prefix is optional; older clients send the bare token.

    Raises:
        MissingTokenError: If the header is absent or empty
    """
    if not authorization or not authorization.strip():
        raise MissingTokenError()
    value = authorization.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = rest.strip()
    if not value:
        raise MissingTokenError()
    return value


async def get_session_token(authorization: Optional[str] = Header(None)) -> str:
    return extract_token(authorization)


async def get_current_session(
    token: str = Depends(get_session_token),
    auth: IAuthService = Depends(get_auth_service),
) -> SessionData:
    """
    Dependency that requires a valid session.

    Usage:
        @router.get("/protected")
        async def protected_route(session: SessionData = Depends(get_current_session)):
            return {"customer_id": session.customer_id}
    """
    return await auth.authenticate(token)


def require_scopes(*required: SessionScope) -> Callable:
    """
    Build a dependency that requires a session holding every scope in required.

    TotalAccess satisfies any requirement on its own.

    Usage:
        @router.patch("/name")
        async def update_name(session: SessionData = Depends(require_scopes(SessionScope.UPDATE_NAME))):
            ...
    """

    async def dependency(session: SessionData = Depends(get_current_session)) -> SessionData:
        if not session.scopes.allows(required):
            raise InsufficientScopesError([scope.value for scope in required])
        return session

    return dependency


# Type alias for cleaner route definitions
RequireSession = Depends(get_current_session)
