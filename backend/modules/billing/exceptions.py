"""
Billing module exceptions.

These exceptions are raised by the billing module and can be caught
by API error handlers to return appropriate HTTP responses. Webhook
failures are all 400-class so the sender's retry policy governs redelivery.
"""

from typing import Optional

from shared.exceptions import ValidationError


class WebhookVerificationError(ValidationError):
    """Raised when a webhook signature is missing or does not match."""

    def __init__(self):
        super().__init__(
            "Webhook signature verification failed",
            code="WEBHOOK_VERIFICATION_FAILED",
        )


class InvalidWebhookPayloadError(ValidationError):
    """Raised when a signed webhook body is not a well-formed event."""

    def __init__(self, reason: str, event_name: Optional[str] = None):
        super().__init__(
            f"Invalid webhook payload: {reason}",
            code="INVALID_WEBHOOK_PAYLOAD",
            details={"event_name": event_name} if event_name else {},
        )


class WebhookCustomerNotFoundError(ValidationError):
    """Raised when an event names a customer that does not exist."""

    def __init__(self, event_name: str):
        super().__init__(
            "No customer matches the webhook event",
            code="WEBHOOK_CUSTOMER_NOT_FOUND",
            details={"event_name": event_name},
        )
