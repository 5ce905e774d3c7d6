"""Tests for the User aggregate and the EmailAddress value object."""

import json

import pytest
from directory.shared.email import EmailAddress
from directory.user.events import PreferencesUpdated, UserRegistered
from directory.user.user import User, UserRole
from protean.exceptions import ValidationError


def _register(**overrides):
    defaults = {"name": "Sam Rivera", "email": "sam@example.com"}
    defaults.update(overrides)
    return User.register(**defaults)


class TestEmailAddress:
    def test_build_normalizes(self):
        assert EmailAddress.build("  Sam@Example.COM ").address == "sam@example.com"

    @pytest.mark.parametrize(
        "address",
        ["no-at-sign.com", "two@@example.com", "sam@localhost", "sam@example..com", ".sam@example.com", "s am@x.com"],
    )
    def test_invalid_addresses_rejected(self, address):
        with pytest.raises(ValidationError):
            EmailAddress(address=address)

    def test_hyphenated_domain_label_rejected(self):
        with pytest.raises(ValidationError):
            EmailAddress(address="sam@-example.com")


class TestUserRegistration:
    def test_defaults(self):
        user = _register()
        assert user.role == UserRole.USER.value
        assert user.verified is False
        assert json.loads(user.saved_businesses) == []
        assert user.notification_preferences.email is True
        assert user.privacy.show_email is False

    def test_raises_user_registered(self):
        user = _register()
        event = user._events[-1]
        assert isinstance(event, UserRegistered)
        assert event.email == "sam@example.com"

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            _register(email="not-an-email")


class TestSavedBusinesses:
    def test_save_and_unsave(self):
        user = _register()
        user.save_business("biz-001")
        assert user.has_saved("biz-001")

        user.unsave_business("biz-001")
        assert not user.has_saved("biz-001")

    def test_saving_twice_keeps_one_entry(self):
        user = _register()
        user.save_business("biz-001")
        user.save_business("biz-001")
        assert json.loads(user.saved_businesses) == ["biz-001"]


class TestPreferences:
    def test_partial_update_keeps_other_values(self):
        user = _register()
        user.update_preferences(notifications={"push": False})

        assert user.notification_preferences.push is False
        assert user.notification_preferences.email is True
        assert isinstance(user._events[-1], PreferencesUpdated)

    def test_privacy_controls_public_profile(self):
        user = _register(city="Austin", identities=["Queer"])
        public = user.to_public_dict()
        assert "email" not in public
        assert public["location"]["city"] == "Austin"
        assert public["identities"] == ["Queer"]

        user.update_preferences(privacy={"show_email": True, "show_location": False, "show_identities": False})
        public = user.to_public_dict()
        assert public["email"] == "sam@example.com"
        assert "location" not in public
        assert "identities" not in public
