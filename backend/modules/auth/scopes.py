"""
Authorization scopes attached to a session.

A token's audience claim carries the serialized scope set. Serialization is
canonical (deduplicated, sorted, comma-joined) so the same grant always
produces the same signed claims.
"""

from enum import Enum
from typing import Any, Iterable

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from shared.exceptions import UnknownVariantError


class SessionScope(str, Enum):
    """Capabilities a session can hold."""

    VIEW_PUBLIC_ID = "ViewPublicID"
    VIEW_EMAIL_ADDRESSES = "ViewEmailAddresses"
    VIEW_PUBLIC_PROFILE = "ViewPublicProfile"
    VIEW_PRIVATE_SENSITIVE_PROFILE = "ViewPrivateSensitiveProfile"
    VIEW_SUBSCRIPTION = "ViewSubscription"
    UPDATE_NAME = "UpdateName"
    UPDATE_EMAIL_ADDRESSES = "UpdateEmailAddresses"
    UPDATE_PREFERENCES = "UpdatePreferences"
    TOTAL_ACCESS = "TotalAccess"

    @classmethod
    def parse(cls, raw: str) -> "SessionScope":
        """Parse a scope name; unknown names are rejected."""
        try:
            return cls(raw.strip())
        except (ValueError, AttributeError):
            raise UnknownVariantError("SessionScope", raw)


class ScopeSet(frozenset):
    """Immutable set of SessionScope values."""

    SEPARATOR = ","

    def __new__(cls, scopes: Iterable[SessionScope] = ()):
        return super().__new__(cls, (SessionScope(s) for s in scopes))

    @classmethod
    def total_access(cls) -> "ScopeSet":
        return cls([SessionScope.TOTAL_ACCESS])

    @classmethod
    def parse(cls, raw: str) -> "ScopeSet":
        """
        Parse a serialized scope set.

        Raises:
            UnknownVariantError: If any element is not a known scope
        """
        if not raw:
            return cls()
        return cls(SessionScope.parse(part) for part in raw.split(cls.SEPARATOR) if part)

    def serialize(self) -> str:
        return self.SEPARATOR.join(sorted(scope.value for scope in self))

    @property
    def has_total_access(self) -> bool:
        return SessionScope.TOTAL_ACCESS in self

    def allows(self, required: Iterable[SessionScope]) -> bool:
        """TotalAccess satisfies any requirement; otherwise every required scope must be held."""
        if self.has_total_access:
            return True
        return set(required) <= self

    def __repr__(self) -> str:
        return f"ScopeSet({self.serialize()!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> CoreSchema:
        # Keep the subclass; a plain frozenset schema would drop its methods.
        return core_schema.is_instance_schema(cls)
