"""
Session token codec.

Tokens are HS512-signed JWTs carrying issuer, subject, audience (the
serialized scope set) and expiry.
"""

from datetime import datetime, timezone

import jwt

from shared.exceptions import ConfigurationError, UnknownVariantError
from shared.utils import random_string

from .exceptions import ExpiredTokenError, InvalidTokenError
from .models import TokenClaims
from .scopes import ScopeSet

ALGORITHM = "HS512"
REQUIRED_CLAIMS = ["iss", "sub", "aud", "exp"]
TOKEN_ID_LENGTH = 16


class TokenCodec:
    """Issues and verifies session tokens with a symmetric key."""

    def __init__(self, signing_key: str, issuer: str, ttl_seconds: int):
        if not signing_key:
            raise ConfigurationError(missing=["API_TOKENS_SIGNING_KEY"])
        if ttl_seconds <= 0:
            raise ConfigurationError(invalid=["API_TOKENS_EXPIRATION_TIME"])
        self._signing_key = signing_key
        self._issuer = issuer
        self.ttl_seconds = ttl_seconds

    def issue(self, subject_id: str, scopes: ScopeSet) -> str:
        """Sign a token for subject_id that expires ttl_seconds from now."""
        now = int(datetime.now(timezone.utc).timestamp())
        claims = {
            "iss": self._issuer,
            "sub": subject_id,
            "aud": scopes.serialize(),
            "exp": now + self.ttl_seconds,
            # Two tokens for the same grant issued in the same second must still differ.
            "jti": random_string(TOKEN_ID_LENGTH),
        }
        return jwt.encode(claims, self._signing_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature, expiry and issuer.

        Raises:
            ExpiredTokenError: If the expiry claim is in the past
            InvalidTokenError: If the token is malformed, forged or carries
                claims this service did not issue
        """
        try:
            payload = jwt.decode(
                token,
                self._signing_key,
                algorithms=[ALGORITHM],
                issuer=self._issuer,
                # The audience is the scope list, validated below instead.
                options={"verify_aud": False, "require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        try:
            claims = TokenClaims(**payload)
            ScopeSet.parse(claims.aud)
        except (ValueError, UnknownVariantError) as e:
            raise InvalidTokenError(f"Invalid token claims: {e}")

        return claims
