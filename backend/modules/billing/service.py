"""
Subscription reconciler.

Merges Lemon Squeezy subscription events into the subscription
sub-document of a customer. Each handler decides which subscription fields
it owns; the reconciler then issues one update that sets those fields and
appends one history entry with $push. The append is atomic on the server,
so concurrent deliveries for the same customer never drop each other's
history entries.

Dispatch:
    subscription_created                      full subscription reset
    subscription_updated                      variant, status, updated_at
    cancelled/resumed/expired/paused/unpaused status, updated_at
    payment_success/failed/recovered          updated_at only
    anything else                             acknowledged, not applied
"""

import json
import logging
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from shared.utils import random_string
from modules.customers.interfaces import ICustomerRepository
from modules.customers.models import Customer

from .exceptions import InvalidWebhookPayloadError, WebhookCustomerNotFoundError
from .interfaces import ISubscriptionReconciler
from .models import (
    OrderEvent,
    ProductCatalog,
    SubscriptionEvent,
    SubscriptionEventName,
    SubscriptionHistoryLog,
    WebhookMeta,
    WebhookResult,
)

logger = logging.getLogger(__name__)

SUBSCRIPTION_ID_LENGTH = 15

Handler = Callable[[SubscriptionEvent, Customer], dict[str, Any]]


class SubscriptionReconciler(ISubscriptionReconciler):
    """Applies subscription webhook events to customer records."""

    def __init__(self, customers: ICustomerRepository, catalog: ProductCatalog):
        self._customers = customers
        self._catalog = catalog
        self._handlers: dict[SubscriptionEventName, Handler] = {
            SubscriptionEventName.CREATED: self._on_created,
            SubscriptionEventName.UPDATED: self._on_updated,
            SubscriptionEventName.CANCELLED: self._on_status_change,
            SubscriptionEventName.RESUMED: self._on_status_change,
            SubscriptionEventName.EXPIRED: self._on_status_change,
            SubscriptionEventName.PAUSED: self._on_status_change,
            SubscriptionEventName.UNPAUSED: self._on_status_change,
            SubscriptionEventName.PAYMENT_SUCCESS: self._on_payment,
            SubscriptionEventName.PAYMENT_FAILED: self._on_payment,
            SubscriptionEventName.PAYMENT_RECOVERED: self._on_payment,
        }

    # -------------------------------------------------------------------------
    # Webhook entry points (raw, already signature-checked bodies)
    # -------------------------------------------------------------------------

    async def handle_subscription_webhook(self, raw_body: bytes) -> WebhookResult:
        payload, meta = _decode(raw_body)
        try:
            event_name = SubscriptionEventName(meta.event_name)
        except ValueError:
            logger.info("Ignoring unhandled webhook event %s", meta.event_name)
            return WebhookResult(event_name=meta.event_name, handled=False)

        try:
            event = SubscriptionEvent.model_validate(payload)
        except PydanticValidationError as e:
            raise InvalidWebhookPayloadError(
                f"{e.error_count()} invalid field(s)", event_name=event_name.value
            )
        return await self.apply(event)

    async def handle_order_webhook(self, raw_body: bytes) -> WebhookResult:
        """Order events are acknowledged so the sender stops retrying; nothing is stored."""
        payload, meta = _decode(raw_body)
        data = payload.get("data")
        order = OrderEvent(meta=meta, data=data if isinstance(data, dict) else {})
        logger.info("Captured order event %s (%s)", order.meta.event_name, order.data.get("id", "-"))
        return WebhookResult(event_name=order.meta.event_name, handled=False)

    # -------------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------------

    async def apply(self, event: SubscriptionEvent) -> WebhookResult:
        """
        Apply one subscription event.

        Returns:
            WebhookResult with handled=False for event names outside the
            dispatch table.

        Raises:
            WebhookCustomerNotFoundError: If no customer matches the event
            UnknownVariantError: If subscription_created names an unknown variant
        """
        try:
            event_name = SubscriptionEventName(event.meta.event_name)
        except ValueError:
            return WebhookResult(event_name=event.meta.event_name, handled=False)

        customer = await self._resolve_customer(event, event_name)

        # Handlers validate before anything is written.
        set_fields = self._handlers[event_name](event, customer)
        history_entry = SubscriptionHistoryLog(
            event=event_name.value,
            date=event.data.attributes.updated_at,
        )

        matched = await self._customers.update_by_id_or_email(
            {"id": customer.id},
            set_fields,
            {"subscription.history_logs": history_entry.model_dump()},
        )
        if not matched:
            raise WebhookCustomerNotFoundError(event_name.value)

        logger.info("Applied %s to customer %s", event_name.value, customer.id)
        return WebhookResult(event_name=event_name.value, handled=True, customer_id=customer.id)

    async def _resolve_customer(
        self,
        event: SubscriptionEvent,
        event_name: SubscriptionEventName,
    ) -> Customer:
        if not event.customer_id and not event.user_email:
            raise InvalidWebhookPayloadError(
                "event carries neither a customer ID nor an email",
                event_name=event_name.value,
            )
        customer = await self._customers.find_by_id_or_email(event.customer_id, event.user_email)
        if customer is None:
            logger.warning("Webhook %s did not match any customer", event_name.value)
            raise WebhookCustomerNotFoundError(event_name.value)
        return customer

    # -------------------------------------------------------------------------
    # Handlers: return the subscription fields the event owns
    # -------------------------------------------------------------------------

    def _on_created(self, event: SubscriptionEvent, customer: Customer) -> dict[str, Any]:
        attributes = event.data.attributes
        frequency = self._catalog.frequency_for(attributes.variant_id)
        slug = self._catalog.slug_for(attributes.product_id)
        return {
            "subscription.id": random_string(SUBSCRIPTION_ID_LENGTH),
            "subscription.product_id": attributes.product_id,
            "subscription.variant_id": attributes.variant_id,
            "subscription.slug": slug.value,
            "subscription.frequency": frequency.value,
            "subscription.status": attributes.status,
            # Tracks account creation, not the billing event.
            "subscription.created_at": customer.created_at,
            "subscription.updated_at": attributes.updated_at,
            "subscription.starts_at": attributes.created_at,
            "subscription.ends_at": attributes.ends_at or "",
            "subscription.renews_at": attributes.renews_at or "",
        }

    def _on_updated(self, event: SubscriptionEvent, customer: Customer) -> dict[str, Any]:
        attributes = event.data.attributes
        return {
            "subscription.variant_id": attributes.variant_id,
            "subscription.status": attributes.status,
            "subscription.updated_at": attributes.updated_at,
        }

    def _on_status_change(self, event: SubscriptionEvent, customer: Customer) -> dict[str, Any]:
        attributes = event.data.attributes
        return {
            "subscription.status": attributes.status,
            "subscription.updated_at": attributes.updated_at,
        }

    def _on_payment(self, event: SubscriptionEvent, customer: Customer) -> dict[str, Any]:
        return {"subscription.updated_at": event.data.attributes.updated_at}


def _decode(raw_body: bytes) -> tuple[dict[str, Any], WebhookMeta]:
    """Parse a webhook body far enough to read its event name."""
    try:
        payload = json.loads(raw_body)
    except ValueError:
        raise InvalidWebhookPayloadError("body is not valid JSON")
    if not isinstance(payload, dict) or not isinstance(payload.get("meta"), dict):
        raise InvalidWebhookPayloadError("missing meta object")
    try:
        meta = WebhookMeta.model_validate(payload["meta"])
    except PydanticValidationError:
        raise InvalidWebhookPayloadError("invalid meta object")
    return payload, meta
