"""
Billing module.

Handles Lemon Squeezy webhooks and keeps each customer's subscription
sub-document in sync with the billing provider.

Public API:
- ISubscriptionReconciler: Interface for webhook processing
- Subscription, Slug, Frequency: Subscription state models
- verify_signature: Webhook authenticity check
- Billing exceptions: WebhookVerificationError, etc.
"""

from .interfaces import ISubscriptionReconciler
from .models import (
    Frequency,
    ProductCatalog,
    Slug,
    Subscription,
    SubscriptionEvent,
    SubscriptionEventName,
    SubscriptionHistoryLog,
    WebhookResult,
)
from .exceptions import (
    InvalidWebhookPayloadError,
    WebhookCustomerNotFoundError,
    WebhookVerificationError,
)
from .webhook import SIGNATURE_HEADER, verify_signature

__all__ = [
    # Interface
    "ISubscriptionReconciler",
    # Models
    "Frequency",
    "ProductCatalog",
    "Slug",
    "Subscription",
    "SubscriptionEvent",
    "SubscriptionEventName",
    "SubscriptionHistoryLog",
    "WebhookResult",
    # Webhook gate
    "SIGNATURE_HEADER",
    "verify_signature",
    # Exceptions
    "InvalidWebhookPayloadError",
    "WebhookCustomerNotFoundError",
    "WebhookVerificationError",
]
