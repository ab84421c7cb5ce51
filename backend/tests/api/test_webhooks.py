"""Tests for Lemon Squeezy webhook endpoints."""

import json
import os

import pytest

from modules.billing.webhook import SIGNATURE_HEADER, compute_signature

TEST_WEBHOOK_SECRET = os.environ["LEMONSQUEEZY_WEBHOOK_SIGNATURE_KEY"]

SUBSCRIPTIONS_URL = "/api/webhooks/lemonsqueezy/events/subscriptions"
ORDERS_URL = "/api/webhooks/lemonsqueezy/events/orders"


def created_event(customer_id: str, variant_id: int = 202) -> bytes:
    return json.dumps({
        "meta": {"event_name": "subscription_created", "custom_data": {"customer_id": customer_id}},
        "data": {
            "type": "subscriptions",
            "id": "sub_1",
            "attributes": {
                "product_id": 100,
                "variant_id": variant_id,
                "user_email": "ada@example.com",
                "status": "active",
                "renews_at": "2027-02-01T10:00:00Z",
                "created_at": "2026-02-01T10:00:00Z",
                "updated_at": "2026-02-01T10:00:00Z",
            },
        },
    }).encode()


def signed(body: bytes, secret: str = TEST_WEBHOOK_SECRET) -> dict[str, str]:
    return {SIGNATURE_HEADER: compute_signature(body, secret), "Content-Type": "application/json"}


class TestSubscriptionWebhook:
    def test_applied(self, client, customer_repository, existing_customer):
        body = created_event(existing_customer.id)

        response = client.post(SUBSCRIPTIONS_URL, content=body, headers=signed(body))

        assert response.status_code == 200
        assert response.json()["message"] == "Subscription event applied"
        assert response.json()["data"]["handled"] is True
        subscription = customer_repository.get(existing_customer.id).subscription
        assert subscription.slug.value == "pro"
        assert subscription.frequency.value == "ANNUALLY"

    def test_unknown_event_is_acknowledged(self, client, customer_repository):
        body = b'{"meta": {"event_name": "foo_bar"}, "data": {}}'

        response = client.post(SUBSCRIPTIONS_URL, content=body, headers=signed(body))

        assert response.status_code == 200
        assert response.json()["message"] == "Subscription event ignored"
        assert customer_repository.updates == []

    @pytest.mark.parametrize("headers", [
        {},
        {SIGNATURE_HEADER: "0" * 64},
        {SIGNATURE_HEADER: "not-hex"},
    ])
    def test_bad_signature(self, client, customer_repository, existing_customer, headers):
        body = created_event(existing_customer.id)

        response = client.post(SUBSCRIPTIONS_URL, content=body, headers=headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "WEBHOOK_VERIFICATION_FAILED"
        assert customer_repository.updates == []

    def test_signature_over_different_bytes(self, client, existing_customer):
        """Re-serializing the payload changes the bytes and breaks the signature."""
        body = created_event(existing_customer.id)
        reformatted = json.dumps(json.loads(body), indent=2).encode()

        response = client.post(SUBSCRIPTIONS_URL, content=reformatted, headers=signed(body))

        assert response.status_code == 400

    def test_unknown_variant(self, client, customer_repository, existing_customer):
        body = created_event(existing_customer.id, variant_id=999)

        response = client.post(SUBSCRIPTIONS_URL, content=body, headers=signed(body))

        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_VARIANT"
        assert customer_repository.updates == []

    def test_customer_not_found(self, client):
        body = created_event("missing").replace(b"ada@example.com", b"ghost@example.com")

        response = client.post(SUBSCRIPTIONS_URL, content=body, headers=signed(body))

        assert response.status_code == 400
        assert response.json()["error_code"] == "WEBHOOK_CUSTOMER_NOT_FOUND"


class TestOrderWebhook:
    def test_acknowledged(self, client):
        body = b'{"meta": {"event_name": "order_created"}, "data": {"id": "ord_1"}}'

        response = client.post(ORDERS_URL, content=body, headers=signed(body))

        assert response.status_code == 200
        assert response.json()["data"]["handled"] is False

    def test_bad_signature(self, client):
        body = b'{"meta": {"event_name": "order_created"}}'
        response = client.post(ORDERS_URL, content=body, headers=signed(body, "wrong-secret"))
        assert response.status_code == 400
