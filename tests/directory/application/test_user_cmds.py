"""Application tests for user registration and preferences."""

import pytest
from directory.user.registration import RegisterUser, UpdatePreferences
from directory.user.user import User
from protean import current_domain
from protean.exceptions import ValidationError


def _register_user(**overrides):
    defaults = {"name": "Jordan Lee", "email": "jordan@example.com"}
    defaults.update(overrides)
    return current_domain.process(RegisterUser(**defaults), asynchronous=False)


class TestRegisterUserCommand:
    def test_registration_persists(self):
        user_id = _register_user(pronouns="they/them", identities='["Nonbinary"]')

        user = current_domain.repository_for(User).get(user_id)
        assert user.email.address == "jordan@example.com"
        assert user.pronouns == "they/them"

    def test_duplicate_email_rejected(self):
        _register_user()
        with pytest.raises(ValidationError) as exc:
            _register_user(name="Someone Else", email="JORDAN@example.com")
        assert "already exists" in str(exc.value)

    def test_duplicate_email_rejected_beyond_first_page_of_members(self):
        repo = current_domain.repository_for(User)
        for index in range(105):
            repo.add(User.register(name=f"Member {index}", email=f"member{index}@example.com"))

        _register_user(email="dup@example.com")
        with pytest.raises(ValidationError) as exc:
            _register_user(name="Someone Else", email="dup@example.com")
        assert "already exists" in str(exc.value)

    def test_email_of_last_seeded_member_is_taken(self):
        repo = current_domain.repository_for(User)
        for index in range(101):
            repo.add(User.register(name=f"Member {index}", email=f"member{index}@example.com"))

        with pytest.raises(ValidationError):
            _register_user(email="member100@example.com")


class TestUpdatePreferencesCommand:
    def test_partial_update(self):
        user_id = _register_user()
        current_domain.process(
            UpdatePreferences(user_id=user_id, notifications='{"new_reviews": false}'),
            asynchronous=False,
        )

        user = current_domain.repository_for(User).get(user_id)
        assert user.notification_preferences.new_reviews is False
        assert user.notification_preferences.safety_alerts is True
        assert user.privacy.show_location is True
