"""
Brevo API client.

Covers the two Brevo endpoints this service uses: contact upsert for the
marketing list and templated transactional email.
"""

import logging
from typing import Any, Optional

import httpx

from shared.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class BrevoClient:
    """Async client for the Brevo v3 REST API."""

    BASE_URL = "https://api.brevo.com/v3"

    def __init__(self, api_key: str, timeout: float = 10.0, base_url: str = BASE_URL):
        self._api_key = api_key
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

    async def create_contact(
        self,
        email: str,
        ext_id: str,
        list_ids: Optional[list[int]] = None,
    ) -> None:
        """Create or update a marketing contact."""
        await self._post(
            "/contacts",
            {
                "updateEnabled": True,
                "email": email,
                "ext_id": ext_id,
                "emailBlacklisted": False,
                "smsBlacklisted": False,
                "listIds": list_ids or [],
            },
        )

    async def send_template_email(
        self,
        *,
        to_email: str,
        to_name: str,
        template_id: int,
        params: dict[str, Any],
        sender_email: str,
        sender_name: str,
        subject: Optional[str] = None,
    ) -> None:
        """Send a transactional email rendered from a Brevo template."""
        payload: dict[str, Any] = {
            "sender": {"name": sender_name, "email": sender_email},
            "templateId": template_id,
            "params": params,
            "to": [{"email": to_email, "name": to_name}],
            "replyTo": {"name": sender_name, "email": sender_email},
        }
        if subject:
            payload["subject"] = subject
        await self._post("/smtp/email", payload)

    async def _post(self, path: str, payload: dict[str, Any]) -> None:
        headers = {
            "api-key": self._api_key,
            "accept": "application/json",
            "content-type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(f"{self._base_url}{path}", json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Brevo request to %s failed with %s", path, e.response.status_code)
            raise ExternalServiceError(
                "Email provider rejected the request",
                service="brevo",
                code="BREVO_REQUEST_FAILED",
                details={"status": e.response.status_code},
            )
        except httpx.HTTPError as e:
            logger.warning("Brevo request to %s failed: %s", path, e)
            raise ExternalServiceError(
                "Could not reach the email provider",
                service="brevo",
                code="BREVO_REQUEST_FAILED",
            )
