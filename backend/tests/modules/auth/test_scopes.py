"""Tests for modules/auth/scopes.py."""

import pytest

from modules.auth.scopes import ScopeSet, SessionScope
from shared.exceptions import UnknownVariantError


class TestSessionScope:
    def test_parse_known_scope(self):
        assert SessionScope.parse("ViewPublicID") is SessionScope.VIEW_PUBLIC_ID

    def test_parse_trims_whitespace(self):
        assert SessionScope.parse(" TotalAccess ") is SessionScope.TOTAL_ACCESS

    def test_parse_unknown_scope_fails_closed(self):
        with pytest.raises(UnknownVariantError):
            SessionScope.parse("AdminEverything")

    def test_parse_non_string_fails_closed(self):
        with pytest.raises(UnknownVariantError):
            SessionScope.parse(None)


class TestScopeSet:
    def test_serialize_is_sorted_and_deduplicated(self):
        scopes = ScopeSet([
            SessionScope.UPDATE_NAME,
            SessionScope.VIEW_EMAIL_ADDRESSES,
            SessionScope.UPDATE_NAME,
        ])
        assert scopes.serialize() == "UpdateName,ViewEmailAddresses"

    def test_serialization_is_canonical(self):
        """The same grant in any order serializes identically."""
        a = ScopeSet([SessionScope.VIEW_SUBSCRIPTION, SessionScope.VIEW_PUBLIC_ID])
        b = ScopeSet([SessionScope.VIEW_PUBLIC_ID, SessionScope.VIEW_SUBSCRIPTION])
        assert a.serialize() == b.serialize()

    def test_parse_round_trip(self):
        scopes = ScopeSet([SessionScope.VIEW_PUBLIC_PROFILE, SessionScope.UPDATE_PREFERENCES])
        assert ScopeSet.parse(scopes.serialize()) == scopes

    def test_parse_empty_string(self):
        assert ScopeSet.parse("") == ScopeSet()

    def test_parse_rejects_unknown_element(self):
        with pytest.raises(UnknownVariantError):
            ScopeSet.parse("ViewPublicID,Root")

    def test_is_immutable(self):
        scopes = ScopeSet.total_access()
        assert not hasattr(scopes, "add")

    def test_repr_shows_serialized_form(self):
        assert repr(ScopeSet.total_access()) == "ScopeSet('TotalAccess')"


class TestAllows:
    def test_total_access_alone_is_sufficient(self):
        scopes = ScopeSet.total_access()
        assert scopes.allows([SessionScope.UPDATE_NAME, SessionScope.UPDATE_PREFERENCES])

    def test_superset_is_allowed(self):
        scopes = ScopeSet([SessionScope.UPDATE_NAME, SessionScope.VIEW_PUBLIC_ID])
        assert scopes.allows([SessionScope.UPDATE_NAME])

    def test_every_required_scope_must_be_held(self):
        """Holding one of two required scopes is not enough."""
        scopes = ScopeSet([SessionScope.UPDATE_NAME])
        assert not scopes.allows([SessionScope.UPDATE_NAME, SessionScope.UPDATE_PREFERENCES])

    def test_missing_scope_is_denied(self):
        scopes = ScopeSet([SessionScope.VIEW_PUBLIC_ID])
        assert not scopes.allows([SessionScope.TOTAL_ACCESS])

    def test_empty_requirement_is_allowed(self):
        assert ScopeSet().allows([])
