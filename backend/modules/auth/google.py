"""
Google OAuth client.

Exchanges an authorization code for tokens and fetches the user's profile.
Both calls are opaque HTTP requests; any failure surfaces as an
ExternalServiceError.
"""

import logging

import httpx

from shared.exceptions import ExternalServiceError

from .models import GoogleUser

logger = logging.getLogger(__name__)


class GoogleOAuthClient:
    """Thin async client for the Google OAuth 2.0 endpoints."""

    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v1/userinfo"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        timeout: float = 10.0,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_url = redirect_url
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret and self._redirect_url)

    async def fetch_user(self, authorization_code: str) -> GoogleUser:
        """Exchange the code and return the Google profile of the signed-in user."""
        if not self.configured:
            raise ExternalServiceError(
                "Google OAuth is not configured",
                service="google",
                code="GOOGLE_NOT_CONFIGURED",
            )

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            try:
                response = await client.post(
                    self.TOKEN_URL,
                    data={
                        "grant_type": "authorization_code",
                        "redirect_uri": self._redirect_url,
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                        "code": authorization_code,
                    },
                )
                response.raise_for_status()
                tokens = response.json()

                response = await client.get(
                    self.USERINFO_URL,
                    params={"alt": "json", "access_token": tokens["access_token"]},
                    headers={"Authorization": f"Bearer {tokens['id_token']}"},
                )
                response.raise_for_status()
                return GoogleUser(**response.json())
            except httpx.HTTPStatusError as e:
                logger.warning(
                    "Google OAuth request failed: %s %s",
                    e.response.status_code,
                    e.request.url.path,
                )
                raise ExternalServiceError(
                    "Google rejected the authorization request",
                    service="google",
                    code="GOOGLE_REQUEST_FAILED",
                    details={"status": e.response.status_code},
                )
            except (httpx.HTTPError, KeyError, ValueError) as e:
                logger.warning("Google OAuth request error: %s", e)
                raise ExternalServiceError(
                    "Could not reach Google",
                    service="google",
                    code="GOOGLE_REQUEST_FAILED",
                )
