"""
Customer service implementation.

Account creation, profile reads and self-service updates. Scope checks
happen in the API layer before these methods are called; the service only
enforces data rules.

New records are persisted before any notification goes out. Brevo and
verification-email failures after a successful write are logged and do not
fail the request.
"""

import logging
from typing import Optional

from shared.exceptions import ExternalServiceError, StorageError
from shared.utils import random_string, utc_now_iso
from modules.auth.exceptions import WrongAuthProviderError
from modules.auth.models import SessionData
from modules.auth.passwords import hash_password, verify_password
from modules.auth.sessions import VerificationTokenStore
from modules.billing.models import Subscription
from modules.notifications.interfaces import INotificationService

from .exceptions import (
    CustomerNotFoundError,
    EmailTakenError,
    IncorrectPasswordError,
    InvalidInputError,
    InvalidVerificationTokenError,
    MaxEmailsReachedError,
    TermsNotAcceptedError,
)
from .interfaces import ICustomerRepository, ICustomerService
from .models import (
    MAX_EMAILS,
    AddEmailRequest,
    AuthProvider,
    CreateCustomerRequest,
    Customer,
    CustomerClass,
    Email,
    Preferences,
    PrivateSensitiveCustomer,
    PublicCustomer,
    UpdateNameRequest,
    UpdatePasswordRequest,
    UpdatePreferencesRequest,
)
from .validators import normalize_email, validate_name, validate_password
from .views import filter_customer_for_scopes, to_public_customer

logger = logging.getLogger(__name__)

CUSTOMER_ID_LENGTH = 30
SUBSCRIPTION_ID_LENGTH = 15


def new_customer(
    name: str,
    email: str,
    customer_class: CustomerClass,
    auth_provider: AuthProvider,
    password_hash: str = "",
    email_verified: bool = False,
) -> Customer:
    """Build a customer with one main email and a free-tier subscription."""
    now = utc_now_iso()
    return Customer(
        id=random_string(CUSTOMER_ID_LENGTH),
        name=name,
        class_=customer_class,
        emails=[Email(address=email, verified=email_verified, main=True)],
        auth_provider=auth_provider,
        password=password_hash,
        subscription=Subscription.free_tier(random_string(SUBSCRIPTION_ID_LENGTH), now),
        created_at=now,
        updated_at=now,
    )


class CustomerService(ICustomerService):
    """Customer account operations backed by an ICustomerRepository."""

    def __init__(
        self,
        repository: ICustomerRepository,
        notifications: INotificationService,
        verification_tokens: VerificationTokenStore,
    ):
        self._repository = repository
        self._notifications = notifications
        self._verification_tokens = verification_tokens

    # -------------------------------------------------------------------------
    # Sign-up
    # -------------------------------------------------------------------------

    async def create_customer(self, request: CreateCustomerRequest) -> Customer:
        if not request.accepted_terms:
            raise TermsNotAcceptedError()

        name = validate_name(request.name)
        email = normalize_email(request.email)
        validate_password(request.password)
        if request.password != request.password_confirmation:
            raise InvalidInputError(
                "password_confirmation", "Passwords do not match", code="PASSWORD_MISMATCH"
            )
        if request.password.lower() == email:
            raise InvalidInputError(
                "password",
                "Password must differ from the email address",
                code="PASSWORD_EQUALS_EMAIL",
            )
        customer_class = CustomerClass.parse(request.class_)

        if await self._repository.get_by_email(email) is not None:
            raise EmailTakenError()

        customer = new_customer(
            name=name,
            email=email,
            customer_class=customer_class,
            auth_provider=AuthProvider.LEGACY,
            password_hash=hash_password(request.password),
        )
        await self._repository.insert(customer)
        logger.info("Created customer %s", customer.id)

        await self.notify_new_customer(customer)
        return customer

    async def notify_new_customer(self, customer: Customer) -> None:
        """Register the marketing contact and, if unverified, send the verification email."""
        email = customer.main_email
        try:
            await self._notifications.register_contact(customer.id, email.address)
        except (ExternalServiceError, StorageError) as e:
            logger.warning("Contact registration failed for customer %s: %s", customer.id, e.code)

        if not email.verified:
            await self._send_verification(customer.id, customer.name, email.address)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_customer_for_session(
        self,
        session: SessionData,
        customer_id: Optional[str] = None,
    ) -> PrivateSensitiveCustomer:
        # A session may only read its own record; anything else looks absent.
        if customer_id and customer_id != session.customer_id:
            raise CustomerNotFoundError(customer_id)

        customer = await self._get_active(session.customer_id)
        return filter_customer_for_scopes(customer, session.scopes)

    async def get_public_customer(self, customer_id: str) -> PublicCustomer:
        customer = await self._get_active(customer_id)
        return to_public_customer(customer)

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    async def update_name(self, customer_id: str, request: UpdateNameRequest) -> str:
        name = validate_name(request.name)
        await self._update(customer_id, {"name": name})
        return name

    async def update_preferences(
        self,
        customer_id: str,
        request: UpdatePreferencesRequest,
    ) -> Preferences:
        changes = request.model_dump(exclude_none=True)
        if not changes:
            raise InvalidInputError("preferences", "No preferences to update", code="EMPTY_UPDATE")

        await self._update(
            customer_id,
            {f"preferences.{field}": value for field, value in changes.items()},
        )
        customer = await self._get_active(customer_id)
        return customer.preferences

    async def update_password(self, customer_id: str, request: UpdatePasswordRequest) -> None:
        customer = await self._get_active(customer_id)
        if customer.auth_provider != AuthProvider.LEGACY:
            raise WrongAuthProviderError(customer.auth_provider.value)
        if not verify_password(request.old_password, customer.password):
            raise IncorrectPasswordError()

        validate_password(request.new_password, field="new_password")
        if request.new_password != request.new_password_confirmation:
            raise InvalidInputError(
                "new_password_confirmation", "Passwords do not match", code="PASSWORD_MISMATCH"
            )

        await self._update(customer_id, {"password": hash_password(request.new_password)})
        logger.info("Password updated for customer %s", customer_id)

    async def add_email(self, customer_id: str, request: AddEmailRequest) -> Email:
        address = normalize_email(request.email)
        customer = await self._get_active(customer_id)

        if customer.owns_email(address):
            raise EmailTakenError(by_caller=True)
        if len(customer.emails) >= MAX_EMAILS:
            raise MaxEmailsReachedError()
        if await self._repository.get_by_email(address) is not None:
            raise EmailTakenError()

        email = Email(address=address, verified=False, main=False)
        if not await self._repository.push_email(customer_id, email, utc_now_iso(), MAX_EMAILS):
            # Lost a race with another add on the same customer.
            raise MaxEmailsReachedError()
        logger.info("Added email to customer %s", customer_id)

        await self._send_verification(customer_id, customer.name, address)
        return email

    async def verify_email(self, token: str) -> str:
        address = await self._verification_tokens.redeem(token)
        if address is None:
            raise InvalidVerificationTokenError()

        if not await self._repository.mark_email_verified(address, utc_now_iso()):
            raise CustomerNotFoundError()
        await self._verification_tokens.discard(token)
        return address

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _get_active(self, customer_id: str) -> Customer:
        customer = await self._repository.get_by_id(customer_id)
        if customer is None or customer.deleted:
            raise CustomerNotFoundError(customer_id)
        return customer

    async def _update(self, customer_id: str, set_fields: dict) -> None:
        set_fields = {**set_fields, "updated_at": utc_now_iso()}
        matched = await self._repository.update_by_id_or_email(
            {"id": customer_id, "deleted": False}, set_fields
        )
        if not matched:
            raise CustomerNotFoundError(customer_id)

    async def _send_verification(self, customer_id: str, name: str, address: str) -> None:
        try:
            await self._notifications.send_email_verification(name, address)
        except (ExternalServiceError, StorageError) as e:
            logger.warning("Verification email failed for customer %s: %s", customer_id, e.code)
