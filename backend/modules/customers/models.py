"""
Customer module data models.

The Customer document is the single source of truth for identity and
subscription state. "class" is a Python keyword, so the field is named
class_ and serialized under its alias; always dump with by_alias=True.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from shared.exceptions import UnknownVariantError
from modules.billing.models import Subscription

MAX_EMAILS = 5


class CustomerClass(str, Enum):
    """Kinds of customer account."""

    PERSONAL = "PERSONAL"
    MANAGER = "MANAGER"
    DEVELOPER = "DEVELOPER"

    @classmethod
    def parse(cls, raw: str) -> "CustomerClass":
        try:
            return cls(raw.strip().upper())
        except (ValueError, AttributeError):
            raise UnknownVariantError("CustomerClass", raw)


class AuthProvider(str, Enum):
    """How a customer signs in."""

    LEGACY = "LEGACY"
    GOOGLE = "GOOGLE"

    @classmethod
    def parse(cls, raw: str) -> "AuthProvider":
        try:
            return cls(raw.strip().upper())
        except (ValueError, AttributeError):
            raise UnknownVariantError("AuthProvider", raw)


class Email(BaseModel):
    """An email address owned by a customer."""

    address: str = Field(..., description="Lowercase email address")
    verified: bool = Field(default=False)
    main: bool = Field(default=False)


class Preferences(BaseModel):
    dark_mode: bool = False
    language: str = "en"
    notifications: bool = True


class Customer(BaseModel):
    """A customer record as stored in the customers collection."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Opaque customer ID")
    name: str
    class_: CustomerClass = Field(..., alias="class")
    emails: list[Email]
    auth_provider: AuthProvider

    # security
    password: str = Field(default="", description="bcrypt hash; empty for non-legacy providers")
    backup_security_codes: list[str] = Field(default_factory=list, description="Hashed codes")

    preferences: Preferences = Field(default_factory=Preferences)
    subscription: Subscription

    created_at: str
    updated_at: str
    deleted: bool = False

    @property
    def main_email(self) -> Email:
        return next(email for email in self.emails if email.main)

    def owns_email(self, address: str) -> bool:
        return any(email.address == address for email in self.emails)


class PrivateSensitiveCustomer(BaseModel):
    """Customer view where each field is present only if the session's scopes allow it."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = None
    class_: Optional[CustomerClass] = Field(None, alias="class")
    emails: Optional[list[Email]] = None
    auth_provider: Optional[AuthProvider] = None
    preferences: Optional[Preferences] = None
    subscription: Optional[Subscription] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deleted: Optional[bool] = None


class PublicCustomer(BaseModel):
    """What anyone may see about a customer."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    class_: CustomerClass = Field(..., alias="class")
    created_at: str


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateCustomerRequest(BaseModel):
    """Sign-up payload."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: EmailStr
    password: str
    password_confirmation: str
    class_: str = Field(..., alias="class")
    accepted_terms: bool = False


class UpdateNameRequest(BaseModel):
    name: str


class UpdatePasswordRequest(BaseModel):
    old_password: str
    new_password: str
    new_password_confirmation: str


class UpdatePreferencesRequest(BaseModel):
    """Partial preferences update; omitted fields are left untouched."""

    dark_mode: Optional[bool] = None
    language: Optional[str] = Field(None, min_length=2, max_length=10)
    notifications: Optional[bool] = None


class AddEmailRequest(BaseModel):
    email: EmailStr
