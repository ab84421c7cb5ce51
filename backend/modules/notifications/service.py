"""
Notification service.

Registers marketing contacts and sends email-verification messages through
Brevo. When the integration is disabled, verification tokens are still
issued (so the verification flow keeps working) but nothing is sent.
"""

import logging
from typing import Optional

from modules.auth.sessions import VerificationTokenStore

from .brevo import BrevoClient

logger = logging.getLogger(__name__)


class NotificationService:
    """Outbound customer notifications."""

    def __init__(
        self,
        client: Optional[BrevoClient],
        verification_tokens: VerificationTokenStore,
        *,
        verification_url: str,
        verification_token_ttl: int,
        verification_template_id: int,
        sender_email: str,
        sender_name: str,
        contacts_list_id: Optional[int] = None,
    ):
        self._client = client
        self._verification_tokens = verification_tokens
        self._verification_url = verification_url
        self._verification_token_ttl = verification_token_ttl
        self._verification_template_id = verification_template_id
        self._sender_email = sender_email
        self._sender_name = sender_name
        self._contacts_list_id = contacts_list_id

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def register_contact(self, customer_id: str, email: str) -> None:
        if self._client is None:
            return
        list_ids = [self._contacts_list_id] if self._contacts_list_id else []
        await self._client.create_contact(email, ext_id=customer_id, list_ids=list_ids)
        logger.info("Registered marketing contact for customer %s", customer_id)

    async def send_email_verification(self, name: str, email: str) -> str:
        """
        Issue a verification token for email and mail the link.

        Returns:
            The issued token.

        Raises:
            StorageError: If the token could not be stored
            ExternalServiceError: If Brevo rejected the email
        """
        token = await self._verification_tokens.issue(email, self._verification_token_ttl)
        if self._client is None:
            logger.debug("Email integration disabled; verification email not sent")
            return token

        await self._client.send_template_email(
            to_email=email,
            to_name=name,
            template_id=self._verification_template_id,
            params={
                "verification_link": self.verification_link(token),
                "greetings_title": f"Hi {name}",
            },
            sender_email=self._sender_email,
            sender_name=self._sender_name,
        )
        return token

    def verification_link(self, token: str) -> str:
        separator = "&" if "?" in self._verification_url else "?"
        return f"{self._verification_url}{separator}token={token}"
