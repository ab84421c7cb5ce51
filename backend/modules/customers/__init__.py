"""
Customers module.

Customer records, sign-up validation and self-service profile updates.

Public API:
- ICustomerRepository / ICustomerService: Interfaces for storage and operations
- Customer, Email, Preferences: Stored record models
- PrivateSensitiveCustomer, PublicCustomer: Read views
- Customer exceptions: CustomerNotFoundError, EmailTakenError, etc.
"""

from .interfaces import ICustomerRepository, ICustomerService
from .models import (
    MAX_EMAILS,
    AddEmailRequest,
    AuthProvider,
    CreateCustomerRequest,
    Customer,
    CustomerClass,
    Email,
    Preferences,
    PrivateSensitiveCustomer,
    PublicCustomer,
    UpdateNameRequest,
    UpdatePasswordRequest,
    UpdatePreferencesRequest,
)
from .exceptions import (
    CustomerNotFoundError,
    EmailTakenError,
    IncorrectPasswordError,
    InvalidInputError,
    InvalidVerificationTokenError,
    MaxEmailsReachedError,
    TermsNotAcceptedError,
)

__all__ = [
    # Interfaces
    "ICustomerRepository",
    "ICustomerService",
    # Models
    "MAX_EMAILS",
    "AddEmailRequest",
    "AuthProvider",
    "CreateCustomerRequest",
    "Customer",
    "CustomerClass",
    "Email",
    "Preferences",
    "PrivateSensitiveCustomer",
    "PublicCustomer",
    "UpdateNameRequest",
    "UpdatePasswordRequest",
    "UpdatePreferencesRequest",
    # Exceptions
    "CustomerNotFoundError",
    "EmailTakenError",
    "IncorrectPasswordError",
    "InvalidInputError",
    "InvalidVerificationTokenError",
    "MaxEmailsReachedError",
    "TermsNotAcceptedError",
]
