"""
Billing module interface.

The API layer depends on ISubscriptionReconciler, not the concrete
implementation, so webhook routes can be tested with a mock.
"""

from typing import Protocol, runtime_checkable

from .models import SubscriptionEvent, WebhookResult


@runtime_checkable
class ISubscriptionReconciler(Protocol):
    """
    Interface for applying Lemon Squeezy webhook events.

    Callers must verify the webhook signature over the raw body before
    handing the body to any of these methods.
    """

    async def handle_subscription_webhook(self, raw_body: bytes) -> WebhookResult:
        """
        Decode and apply a subscription event.

        Args:
            raw_body: Signature-checked request body

        Returns:
            WebhookResult; handled=False for event names this service ignores

        Raises:
            InvalidWebhookPayloadError: If the body is not a valid event
            WebhookCustomerNotFoundError: If no customer matches
            UnknownVariantError: If a created event names an unknown variant
        """
        ...

    async def handle_order_webhook(self, raw_body: bytes) -> WebhookResult:
        """Acknowledge an order event without storing it."""
        ...

    async def apply(self, event: SubscriptionEvent) -> WebhookResult:
        """Apply an already-decoded subscription event."""
        ...
