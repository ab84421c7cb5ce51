"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .scopes import ScopeSet


class TokenClaims(BaseModel):
    """
    Decoded session token claims.

    The audience claim carries the serialized scope set.
    """

    iss: str = Field(..., description="Issuer (API URL)")
    sub: str = Field(..., description="Subject (customer ID)")
    aud: str = Field(..., description="Serialized scope set")
    exp: int = Field(..., description="Expiration timestamp")

    @property
    def scopes(self) -> ScopeSet:
        return ScopeSet.parse(self.aud)


class SessionData(BaseModel):
    """
    The authenticated caller of a request.

    Built from a verified token whose session is still present in the store.
    """

    model_config = ConfigDict(frozen=True)

    customer_id: str = Field(..., description="Customer ID")
    scopes: ScopeSet = Field(..., description="Granted scopes")


class SessionGrant(BaseModel):
    """A freshly issued session token."""

    token: str = Field(..., description="Bearer token")
    customer_id: str = Field(..., description="Customer ID")
    expires_in: int = Field(..., description="Lifetime in seconds")
    scopes: list[str] = Field(default_factory=list, description="Granted scopes")


class LegacyLoginRequest(BaseModel):
    """Email/password sign-in request."""

    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Plain-text password")


class GoogleUser(BaseModel):
    """Subset of the Google userinfo response."""

    id: Optional[str] = None
    email: Optional[str] = None
    verified_email: Optional[bool] = None
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None
    locale: Optional[str] = None
