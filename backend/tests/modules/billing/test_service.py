"""Tests for the subscription reconciler."""

import asyncio
import json

import pytest

from modules.billing.exceptions import InvalidWebhookPayloadError, WebhookCustomerNotFoundError
from modules.billing.models import Frequency, Slug, SubscriptionEvent
from modules.billing.service import SubscriptionReconciler
from shared.exceptions import UnknownVariantError


def subscription_payload(
    event_name: str,
    *,
    customer_id: str = "",
    user_email: str = "ada@example.com",
    variant_id: int = 201,
    status: str = "active",
    updated_at: str = "2026-02-01T10:00:00Z",
) -> dict:
    meta = {"event_name": event_name}
    if customer_id:
        meta["custom_data"] = {"customer_id": customer_id}
    return {
        "meta": meta,
        "data": {
            "type": "subscriptions",
            "id": "sub_1",
            "attributes": {
                "product_id": 100,
                "variant_id": variant_id,
                "user_email": user_email,
                "status": status,
                "renews_at": "2026-03-01T10:00:00Z",
                "ends_at": None,
                "created_at": "2026-02-01T09:59:00Z",
                "updated_at": updated_at,
            },
        },
    }


def as_body(payload: dict) -> bytes:
    return json.dumps(payload).encode()


class TestSubscriptionReconciler:
    @pytest.fixture
    def reconciler(self, customer_repository, catalog):
        return SubscriptionReconciler(customer_repository, catalog)

    @pytest.mark.asyncio
    async def test_created_sets_paid_subscription(self, reconciler, customer_repository, existing_customer):
        old_subscription_id = existing_customer.subscription.id

        result = await reconciler.handle_subscription_webhook(
            as_body(subscription_payload("subscription_created", customer_id=existing_customer.id))
        )

        assert result.handled is True
        assert result.customer_id == existing_customer.id
        subscription = customer_repository.get(existing_customer.id).subscription
        assert subscription.id != old_subscription_id
        assert len(subscription.id) == 15
        assert subscription.slug == Slug.PRO
        assert subscription.frequency == Frequency.MONTHLY
        assert subscription.product_id == 100
        assert subscription.variant_id == 201
        assert subscription.status == "active"
        assert subscription.created_at == existing_customer.created_at
        assert subscription.starts_at == "2026-02-01T09:59:00Z"
        assert subscription.renews_at == "2026-03-01T10:00:00Z"
        assert subscription.ends_at == ""
        assert [log.event for log in subscription.history_logs] == ["subscription_created"]

    @pytest.mark.asyncio
    async def test_lifecycle_keeps_full_history(self, reconciler, customer_repository, existing_customer):
        """created, payment, cancelled: three entries, fields from creation preserved."""
        for name, status, updated_at in [
            ("subscription_created", "active", "2026-02-01T10:00:00Z"),
            ("subscription_payment_success", "active", "2026-02-01T10:01:00Z"),
            ("subscription_cancelled", "cancelled", "2026-02-10T08:00:00Z"),
        ]:
            await reconciler.handle_subscription_webhook(as_body(subscription_payload(
                name, customer_id=existing_customer.id, status=status, updated_at=updated_at,
            )))

        subscription = customer_repository.get(existing_customer.id).subscription
        assert [(log.event, log.date) for log in subscription.history_logs] == [
            ("subscription_created", "2026-02-01T10:00:00Z"),
            ("subscription_payment_success", "2026-02-01T10:01:00Z"),
            ("subscription_cancelled", "2026-02-10T08:00:00Z"),
        ]
        assert subscription.status == "cancelled"
        assert subscription.updated_at == "2026-02-10T08:00:00Z"
        assert subscription.slug == Slug.PRO
        assert subscription.frequency == Frequency.MONTHLY

    @pytest.mark.asyncio
    async def test_updated_changes_variant_and_status(self, reconciler, customer_repository, existing_customer):
        await reconciler.handle_subscription_webhook(
            as_body(subscription_payload("subscription_created", customer_id=existing_customer.id))
        )
        await reconciler.handle_subscription_webhook(as_body(subscription_payload(
            "subscription_updated", customer_id=existing_customer.id, variant_id=202, status="past_due",
        )))

        subscription = customer_repository.get(existing_customer.id).subscription
        assert subscription.variant_id == 202
        assert subscription.status == "past_due"
        # Frequency is only derived on creation.
        assert subscription.frequency == Frequency.MONTHLY

    @pytest.mark.asyncio
    async def test_payment_only_touches_updated_at(self, reconciler, customer_repository, existing_customer):
        await reconciler.handle_subscription_webhook(as_body(subscription_payload(
            "subscription_payment_failed", customer_id=existing_customer.id, status="past_due",
        )))

        update = customer_repository.updates[-1]
        assert update["$set"] == {"subscription.updated_at": "2026-02-01T10:00:00Z"}
        assert update["$push"] == {
            "subscription.history_logs": {
                "event": "subscription_payment_failed",
                "date": "2026-02-01T10:00:00Z",
            }
        }

    @pytest.mark.asyncio
    async def test_update_targets_resolved_customer(self, reconciler, customer_repository, existing_customer):
        """An event matched by email updates that customer by ID."""
        await reconciler.handle_subscription_webhook(
            as_body(subscription_payload("subscription_resumed", user_email="ADA@example.com"))
        )
        assert customer_repository.updates[-1]["query"] == {"id": existing_customer.id}

    @pytest.mark.asyncio
    async def test_unknown_variant_writes_nothing(self, reconciler, customer_repository, existing_customer):
        with pytest.raises(UnknownVariantError):
            await reconciler.handle_subscription_webhook(as_body(subscription_payload(
                "subscription_created", customer_id=existing_customer.id, variant_id=999,
            )))

        assert customer_repository.updates == []
        assert customer_repository.get(existing_customer.id).subscription.history_logs == []

    @pytest.mark.asyncio
    async def test_unknown_event_is_ignored(self, reconciler, customer_repository, existing_customer):
        result = await reconciler.handle_subscription_webhook(
            as_body({"meta": {"event_name": "foo_bar"}, "data": {}})
        )
        assert result.handled is False
        assert result.event_name == "foo_bar"
        assert customer_repository.updates == []

    @pytest.mark.asyncio
    async def test_concurrent_events_both_recorded(self, reconciler, customer_repository, existing_customer):
        first = subscription_payload(
            "subscription_payment_success", customer_id=existing_customer.id, updated_at="2026-02-01T10:00:00Z",
        )
        second = subscription_payload(
            "subscription_payment_success", customer_id=existing_customer.id, updated_at="2026-02-01T10:00:01Z",
        )

        await asyncio.gather(
            reconciler.handle_subscription_webhook(as_body(first)),
            reconciler.handle_subscription_webhook(as_body(second)),
        )

        logs = customer_repository.get(existing_customer.id).subscription.history_logs
        assert sorted(log.date for log in logs) == ["2026-02-01T10:00:00Z", "2026-02-01T10:00:01Z"]

    @pytest.mark.asyncio
    async def test_customer_not_found(self, reconciler):
        with pytest.raises(WebhookCustomerNotFoundError):
            await reconciler.handle_subscription_webhook(as_body(subscription_payload(
                "subscription_created", customer_id="missing", user_email="ghost@example.com",
            )))

    @pytest.mark.asyncio
    async def test_event_without_identity(self, reconciler):
        with pytest.raises(InvalidWebhookPayloadError):
            await reconciler.handle_subscription_webhook(
                as_body(subscription_payload("subscription_created", user_email=""))
            )

    @pytest.mark.asyncio
    async def test_invalid_json(self, reconciler):
        with pytest.raises(InvalidWebhookPayloadError):
            await reconciler.handle_subscription_webhook(b"{not json")

    @pytest.mark.asyncio
    async def test_missing_meta(self, reconciler):
        with pytest.raises(InvalidWebhookPayloadError):
            await reconciler.handle_subscription_webhook(as_body({"data": {}}))

    @pytest.mark.asyncio
    async def test_known_event_with_malformed_data(self, reconciler):
        payload = subscription_payload("subscription_updated")
        del payload["data"]["attributes"]["status"]
        with pytest.raises(InvalidWebhookPayloadError) as exc_info:
            await reconciler.handle_subscription_webhook(as_body(payload))
        assert exc_info.value.details == {"event_name": "subscription_updated"}

    @pytest.mark.asyncio
    async def test_apply_decoded_event(self, reconciler, existing_customer):
        event = SubscriptionEvent.model_validate(
            subscription_payload("subscription_expired", customer_id=existing_customer.id, status="expired")
        )
        result = await reconciler.apply(event)
        assert result.handled is True

    @pytest.mark.asyncio
    async def test_order_event_is_acknowledged(self, reconciler, customer_repository):
        result = await reconciler.handle_order_webhook(
            as_body({"meta": {"event_name": "order_created"}, "data": {"id": "ord_1"}})
        )
        assert result.event_name == "order_created"
        assert result.handled is False
        assert customer_repository.updates == []
