"""
Customers module interfaces.

The auth and billing modules depend on ICustomerRepository rather than the
Motor-backed implementation, so tests can substitute an in-memory store.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .models import (
    AddEmailRequest,
    CreateCustomerRequest,
    Customer,
    Email,
    Preferences,
    PrivateSensitiveCustomer,
    PublicCustomer,
    UpdateNameRequest,
    UpdatePasswordRequest,
    UpdatePreferencesRequest,
)


@runtime_checkable
class ICustomerRepository(Protocol):
    """Storage contract for customer records."""

    async def find_by_id_or_email(
        self,
        customer_id: str = "",
        email: str = "",
    ) -> Optional[Customer]:
        """
        Find a customer matching the ID or any of its email addresses.

        Raises:
            ValidationError: If both identifiers are empty
            StorageError: If the database call fails
        """
        ...

    async def get_by_id(self, customer_id: str) -> Optional[Customer]:
        ...

    async def get_by_email(self, email: str) -> Optional[Customer]:
        ...

    async def insert(self, customer: Customer) -> Customer:
        ...

    async def update_by_id_or_email(
        self,
        query: dict[str, Any],
        set_fields: dict[str, Any],
        push_fields: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Apply one partial update ($set plus optional $push).

        Returns:
            True if a customer matched the filter
        """
        ...

    async def mark_email_verified(self, address: str, updated_at: str) -> bool:
        ...

    async def push_email(
        self,
        customer_id: str,
        email: Email,
        updated_at: str,
        max_emails: int = ...,
    ) -> bool:
        """Append an email unless the customer already holds the maximum."""
        ...


@runtime_checkable
class ICustomerService(Protocol):
    """Customer account operations exposed to the API layer."""

    async def create_customer(self, request: CreateCustomerRequest) -> Customer:
        """
        Validate a sign-up request and persist the new customer.

        Raises:
            InvalidInputError: If a field fails validation
            UnknownVariantError: If the account class is not recognized
            EmailTakenError: If the email already belongs to a customer
        """
        ...

    async def get_customer_for_session(
        self,
        session: Any,
        customer_id: str,
    ) -> PrivateSensitiveCustomer:
        """
        Fetch the session owner's record, filtered by the session's scopes.

        Raises:
            CustomerNotFoundError: If customer_id is not the session owner
        """
        ...

    async def get_public_customer(self, customer_id: str) -> PublicCustomer:
        ...

    async def update_name(self, customer_id: str, request: UpdateNameRequest) -> str:
        ...

    async def update_preferences(
        self,
        customer_id: str,
        request: UpdatePreferencesRequest,
    ) -> Preferences:
        ...

    async def update_password(self, customer_id: str, request: UpdatePasswordRequest) -> None:
        ...

    async def add_email(self, customer_id: str, request: AddEmailRequest) -> Email:
        ...

    async def verify_email(self, token: str) -> str:
        """
        Redeem a one-time verification token.

        Returns:
            The verified email address
        """
        ...
