"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations from Settings and the
shared Mongo/Redis clients.
"""

from typing import TYPE_CHECKING

from shared.config import get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.auth.sessions import SessionStore, VerificationTokenStore
    from modules.auth.tokens import TokenCodec
    from modules.billing.interfaces import ISubscriptionReconciler
    from modules.customers.interfaces import ICustomerRepository, ICustomerService
    from modules.notifications.interfaces import INotificationService


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._settings = get_settings()
        self._token_codec: "TokenCodec | None" = None
        self._session_store: "SessionStore | None" = None
        self._verification_tokens: "VerificationTokenStore | None" = None
        self._customer_repository: "ICustomerRepository | None" = None
        self._notifications: "INotificationService | None" = None
        self._customers: "ICustomerService | None" = None
        self._auth: "IAuthService | None" = None
        self._reconciler: "ISubscriptionReconciler | None" = None

    @property
    def token_codec(self) -> "TokenCodec":
        if self._token_codec is None:
            from modules.auth.tokens import TokenCodec
            self._token_codec = TokenCodec(
                signing_key=self._settings.api_tokens_signing_key,
                issuer=self._settings.api_url,
                ttl_seconds=self._settings.api_tokens_expiration_time,
            )
        return self._token_codec

    @property
    def session_store(self) -> "SessionStore":
        if self._session_store is None:
            from modules.auth.sessions import SessionStore
            from shared.database import get_redis_client
            self._session_store = SessionStore(get_redis_client())
        return self._session_store

    @property
    def verification_tokens(self) -> "VerificationTokenStore":
        if self._verification_tokens is None:
            from modules.auth.sessions import VerificationTokenStore
            from shared.database import get_redis_client
            self._verification_tokens = VerificationTokenStore(get_redis_client())
        return self._verification_tokens

    @property
    def customer_repository(self) -> "ICustomerRepository":
        """Get the customer repository instance."""
        if self._customer_repository is None:
            from modules.customers.repository import COLLECTION_NAME, CustomerRepository
            from shared.database import get_database
            self._customer_repository = CustomerRepository(get_database()[COLLECTION_NAME])
        return self._customer_repository

    @property
    def notifications(self) -> "INotificationService":
        """Get the notification service; Brevo is only wired when enabled and keyed."""
        if self._notifications is None:
            from modules.notifications.brevo import BrevoClient
            from modules.notifications.service import NotificationService
            settings = self._settings
            client = None
            if settings.enable_email_integration and settings.brevo_api_key:
                client = BrevoClient(settings.brevo_api_key, timeout=settings.http_timeout_seconds)
            self._notifications = NotificationService(
                client,
                self.verification_tokens,
                verification_url=settings.email_verification_url,
                verification_token_ttl=settings.email_verification_token_ttl,
                verification_template_id=settings.brevo_email_verification_template_id,
                sender_email=settings.sender_email,
                sender_name=settings.sender_name,
                contacts_list_id=settings.brevo_customers_list_id,
            )
        return self._notifications

    @property
    def customers(self) -> "ICustomerService":
        """Get the customer service instance."""
        if self._customers is None:
            from modules.customers.service import CustomerService
            self._customers = CustomerService(
                repository=self.customer_repository,
                notifications=self.notifications,
                verification_tokens=self.verification_tokens,
            )
        return self._customers

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth is None:
            from modules.auth.google import GoogleOAuthClient
            from modules.auth.service import AuthService
            settings = self._settings
            self._auth = AuthService(
                codec=self.token_codec,
                sessions=self.session_store,
                customers=self.customer_repository,
                google=GoogleOAuthClient(
                    settings.google_client_id,
                    settings.google_client_secret,
                    settings.google_redirect_url,
                    timeout=settings.http_timeout_seconds,
                ),
                customer_service=self.customers,
                renew_grace_seconds=settings.session_renew_grace_seconds,
            )
        return self._auth

    @property
    def reconciler(self) -> "ISubscriptionReconciler":
        """Get the subscription reconciler instance."""
        if self._reconciler is None:
            from modules.billing.models import ProductCatalog
            from modules.billing.service import SubscriptionReconciler
            settings = self._settings
            self._reconciler = SubscriptionReconciler(
                customers=self.customer_repository,
                catalog=ProductCatalog(
                    pro_product_id=settings.pro_product_id,
                    pro_monthly_variant_id=settings.pro_monthly_variant_id,
                    pro_annually_variant_id=settings.pro_annually_variant_id,
                ),
            )
        return self._reconciler

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._token_codec = None
        self._session_store = None
        self._verification_tokens = None
        self._customer_repository = None
        self._notifications = None
        self._customers = None
        self._auth = None
        self._reconciler = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_customer_service() -> "ICustomerService":
    """FastAPI dependency for customer service."""
    return get_container().customers


def get_reconciler() -> "ISubscriptionReconciler":
    """FastAPI dependency for the subscription reconciler."""
    return get_container().reconciler


def get_webhook_secret() -> str:
    """FastAPI dependency for the Lemon Squeezy signing secret."""
    return get_settings().lemonsqueezy_webhook_signature_key
