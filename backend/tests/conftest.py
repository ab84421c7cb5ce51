"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Required settings are seeded into the environment before any application
module is imported, since importing the api package builds the app.
"""

import os

TEST_ENV = {
    "MONGO_URI": "mongodb://localhost:27017",
    "MONGO_DB_NAME": "identa_test",
    "REDIS_URI": "redis://localhost:6379/0",
    "API_TOKENS_SIGNING_KEY": "test-signing-key-for-testing-only",
    "API_URL": "http://testserver",
    "LEMONSQUEEZY_WEBHOOK_SIGNATURE_KEY": "test-webhook-secret",
    "PRO_PRODUCT_ID": "100",
    "PRO_MONTHLY_VARIANT_ID": "201",
    "PRO_ANNUALLY_VARIANT_ID": "202",
}
for _key, _value in TEST_ENV.items():
    os.environ.setdefault(_key, _value)

import pytest

from modules.auth.scopes import ScopeSet, SessionScope
from modules.auth.tokens import TokenCodec
from modules.billing.models import ProductCatalog
from modules.customers.models import AuthProvider, CustomerClass
from modules.customers.service import new_customer
from shared.config import get_settings

from tests.fakes import (
    FakeSessionStore,
    FakeVerificationTokenStore,
    InMemoryCustomerRepository,
    RecordingNotifications,
)

TEST_SIGNING_KEY = TEST_ENV["API_TOKENS_SIGNING_KEY"]
TEST_ISSUER = TEST_ENV["API_URL"]
TEST_WEBHOOK_SECRET = TEST_ENV["LEMONSQUEEZY_WEBHOOK_SIGNATURE_KEY"]


@pytest.fixture(autouse=True)
def reset_app_state():
    """Reset the settings cache and service container around each test."""
    from api.dependencies import reset_container

    get_settings.cache_clear()
    reset_container()
    yield
    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def token_codec() -> TokenCodec:
    return TokenCodec(TEST_SIGNING_KEY, TEST_ISSUER, ttl_seconds=3600)


@pytest.fixture
def catalog() -> ProductCatalog:
    return ProductCatalog(pro_product_id=100, pro_monthly_variant_id=201, pro_annually_variant_id=202)


@pytest.fixture
def customer_repository() -> InMemoryCustomerRepository:
    return InMemoryCustomerRepository()


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def verification_tokens() -> FakeVerificationTokenStore:
    return FakeVerificationTokenStore()


@pytest.fixture
def notifications(verification_tokens) -> RecordingNotifications:
    return RecordingNotifications(verification_tokens)


@pytest.fixture
def existing_customer(customer_repository):
    """A stored legacy customer with the password 'secret123'."""
    from modules.auth.passwords import hash_password

    customer = new_customer(
        name="Ada",
        email="ada@example.com",
        customer_class=CustomerClass.DEVELOPER,
        auth_provider=AuthProvider.LEGACY,
        password_hash=hash_password("secret123"),
    )
    customer_repository.add(customer)
    return customer


@pytest.fixture
def total_access() -> ScopeSet:
    return ScopeSet.total_access()


@pytest.fixture
def read_only_scopes() -> ScopeSet:
    return ScopeSet([SessionScope.VIEW_PUBLIC_ID, SessionScope.VIEW_PUBLIC_PROFILE])
