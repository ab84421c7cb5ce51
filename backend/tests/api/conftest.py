"""
Fixtures for endpoint tests.

The app's service dependencies are overridden with real services wired to
the in-memory fakes, so requests run the full route, service and error
handling path without MongoDB, Redis or Brevo.
"""

import pytest
from fastapi.testclient import TestClient

from api import app
from api.dependencies import get_auth_service, get_customer_service, get_reconciler
from modules.auth.service import AuthService
from modules.billing.service import SubscriptionReconciler
from modules.customers.service import CustomerService


@pytest.fixture
def customer_service(customer_repository, notifications, verification_tokens):
    return CustomerService(customer_repository, notifications, verification_tokens)


@pytest.fixture
def auth_service(token_codec, session_store, customer_repository, customer_service):
    return AuthService(
        token_codec,
        session_store,
        customer_repository,
        customer_service=customer_service,
        renew_grace_seconds=30,
    )


@pytest.fixture
def client(auth_service, customer_service, customer_repository, catalog):
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_customer_service] = lambda: customer_service
    app.dependency_overrides[get_reconciler] = lambda: SubscriptionReconciler(customer_repository, catalog)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def issue_session(token_codec, session_store):
    """Return a helper that stores a session and returns its Authorization header."""

    def issue(customer_id: str, scopes) -> dict[str, str]:
        token = token_codec.issue(customer_id, scopes)
        session_store.sessions[token] = customer_id
        session_store.ttls[token] = token_codec.ttl_seconds
        return {"Authorization": f"Bearer {token}"}

    return issue
