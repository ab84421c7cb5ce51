"""
Authentication service implementation.

Issues, resolves, renews and revokes sessions. A session is the pair of a
signed token (carrying subject, scopes and expiry) and a store entry
(token -> customer ID) with the same lifetime; both must agree for the
session to be valid.
"""

import logging
from typing import Optional

from modules.customers.interfaces import ICustomerRepository
from modules.customers.models import AuthProvider, Customer, CustomerClass
from modules.customers.service import CustomerService, new_customer
from modules.customers.validators import NAME_MAX_LENGTH, normalize_email

from .exceptions import (
    InvalidCredentialsError,
    MissingTokenError,
    OAuthDeniedError,
    SessionMismatchError,
    SessionNotFoundError,
    WrongAuthProviderError,
)
from .google import GoogleOAuthClient
from .interfaces import IAuthService
from .models import SessionData, SessionGrant
from .passwords import verify_password
from .scopes import ScopeSet
from .sessions import SessionStore
from .tokens import TokenCodec

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Uses TokenCodec for signed tokens, SessionStore (Redis) for server-side
    session state, and the customer repository for credential lookup.
    """

    def __init__(
        self,
        codec: TokenCodec,
        sessions: SessionStore,
        customers: ICustomerRepository,
        google: Optional[GoogleOAuthClient] = None,
        customer_service: Optional[CustomerService] = None,
        renew_grace_seconds: int = 30,
    ):
        self._codec = codec
        self._sessions = sessions
        self._customers = customers
        self._google = google
        self._customer_service = customer_service
        self._renew_grace_seconds = renew_grace_seconds

    async def authenticate(self, token: str) -> SessionData:
        if not token:
            raise MissingTokenError()

        claims = self._codec.verify(token)
        stored_subject = await self._sessions.get(token)
        if stored_subject is None:
            raise SessionNotFoundError()
        if stored_subject != claims.sub:
            logger.warning("Session subject mismatch for token subject %s", claims.sub)
            raise SessionMismatchError()

        return SessionData(customer_id=claims.sub, scopes=claims.scopes)

    async def get_session(self, token: str) -> SessionData:
        return await self.authenticate(token)

    async def login_legacy(self, email: str, password: str) -> SessionGrant:
        address = email.strip().lower()
        customer = await self._customers.get_by_email(address) if address else None
        if customer is None or customer.deleted:
            raise InvalidCredentialsError()
        if customer.auth_provider != AuthProvider.LEGACY:
            raise WrongAuthProviderError(customer.auth_provider.value)
        if not verify_password(password, customer.password):
            raise InvalidCredentialsError()

        logger.info("Legacy sign-in for customer %s", customer.id)
        return await self._start_session(customer.id, ScopeSet.total_access())

    async def login_google(self, code: Optional[str], error: Optional[str] = None) -> SessionGrant:
        if error:
            raise OAuthDeniedError(error)
        if not code:
            raise OAuthDeniedError("missing_code")
        if self._google is None:
            raise OAuthDeniedError("google_not_enabled")

        profile = await self._google.fetch_user(code)
        if not profile.email:
            raise OAuthDeniedError("missing_email")
        address = normalize_email(profile.email)

        customer = await self._customers.get_by_email(address)
        if customer is not None:
            if customer.deleted:
                raise OAuthDeniedError("account_deleted")
            if customer.auth_provider != AuthProvider.GOOGLE:
                raise WrongAuthProviderError(customer.auth_provider.value)
        else:
            customer = await self._register_google_customer(
                address,
                name=profile.name or profile.given_name or address.split("@")[0],
                verified=bool(profile.verified_email),
            )

        logger.info("Google sign-in for customer %s", customer.id)
        return await self._start_session(customer.id, ScopeSet.total_access())

    async def renew_session(self, token: str) -> SessionGrant:
        session = await self.authenticate(token)
        grant = await self._start_session(session.customer_id, session.scopes)
        await self._sessions.renew(token, self._renew_grace_seconds)
        return grant

    async def revoke_session(self, token: str) -> None:
        session = await self.authenticate(token)
        await self._sessions.delete(token)
        logger.info("Revoked session for customer %s", session.customer_id)

    async def _start_session(self, customer_id: str, scopes: ScopeSet) -> SessionGrant:
        token = self._codec.issue(customer_id, scopes)
        await self._sessions.put(token, customer_id, self._codec.ttl_seconds)
        return SessionGrant(
            token=token,
            customer_id=customer_id,
            expires_in=self._codec.ttl_seconds,
            scopes=sorted(scope.value for scope in scopes),
        )

    async def _register_google_customer(self, address: str, name: str, verified: bool) -> Customer:
        customer = new_customer(
            name=name.strip()[:NAME_MAX_LENGTH],
            email=address,
            customer_class=CustomerClass.PERSONAL,
            auth_provider=AuthProvider.GOOGLE,
            email_verified=verified,
        )
        await self._customers.insert(customer)
        logger.info("Created customer %s from Google sign-in", customer.id)

        if self._customer_service is not None:
            await self._customer_service.notify_new_customer(customer)
        return customer
