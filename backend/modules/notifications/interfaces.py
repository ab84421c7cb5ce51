"""
Notifications module interface.

The customers module depends on INotificationService, not on Brevo.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class INotificationService(Protocol):
    """Outbound customer notifications."""

    @property
    def enabled(self) -> bool:
        ...

    async def register_contact(self, customer_id: str, email: str) -> None:
        """Add the customer to the marketing contact list."""
        ...

    async def send_email_verification(self, name: str, email: str) -> str:
        """Issue a one-time verification token and email the link; returns the token."""
        ...
