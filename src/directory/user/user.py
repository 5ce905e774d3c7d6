"""User aggregate: a community member who reviews and saves businesses.

Authentication lives outside this domain; a User here is the profile that
reviews point at, with the preferences and privacy switches the rest of the
app reads.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change
from protean.fields import Boolean, DateTime, String, Text, ValueObject

from directory.domain import directory
from directory.shared.email import EmailAddress
from directory.user.events import PreferencesUpdated, UserRegistered

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class UserRole(Enum):
    USER = "User"
    MODERATOR = "Moderator"
    ADMIN = "Admin"


@directory.value_object(part_of="User")
class NotificationPreferences:
    email = Boolean(default=True)
    push = Boolean(default=True)
    community_updates = Boolean(default=True)
    new_reviews = Boolean(default=True)
    safety_alerts = Boolean(default=True)


@directory.value_object(part_of="User")
class PrivacySettings:
    show_email = Boolean(default=False)
    show_location = Boolean(default=True)
    show_identities = Boolean(default=True)


@directory.aggregate
class User:
    name = String(required=True, max_length=100)
    email = ValueObject(EmailAddress, required=True)
    image = String(max_length=500)
    bio = String(max_length=500)
    pronouns = String(max_length=50)
    identities = Text()  # JSON array of strings
    accessibility_needs = Text()  # JSON array of strings
    city = String(max_length=100)
    state = String(max_length=100)
    country = String(max_length=100)
    verified = Boolean(default=False)
    role = String(choices=UserRole, default=UserRole.USER.value)
    notification_preferences = ValueObject(NotificationPreferences)
    privacy = ValueObject(PrivacySettings)
    saved_businesses = Text()  # JSON array of business ids
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(
        cls,
        name,
        email,
        pronouns=None,
        bio=None,
        identities=None,
        accessibility_needs=None,
        city=None,
        state=None,
        country=None,
        role=UserRole.USER.value,
    ):
        now = datetime.now(UTC)
        user = cls(
            name=name.strip() if name else name,
            email=EmailAddress.build(email),
            pronouns=pronouns,
            bio=bio,
            identities=json.dumps(identities or []),
            accessibility_needs=json.dumps(accessibility_needs or []),
            city=city,
            state=state,
            country=country,
            role=role,
            notification_preferences=NotificationPreferences(),
            privacy=PrivacySettings(),
            saved_businesses=json.dumps([]),
            created_at=now,
            updated_at=now,
        )

        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email.address,
                name=user.name,
                registered_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Saved businesses
    # -------------------------------------------------------------------
    def _saved(self):
        return json.loads(self.saved_businesses) if self.saved_businesses else []

    def has_saved(self, business_id):
        return str(business_id) in self._saved()

    def save_business(self, business_id):
        saved = self._saved()
        if str(business_id) not in saved:
            saved.append(str(business_id))
        self.saved_businesses = json.dumps(saved)
        self.updated_at = datetime.now(UTC)

    def unsave_business(self, business_id):
        self.saved_businesses = json.dumps([b for b in self._saved() if b != str(business_id)])
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------
    def update_preferences(self, notifications=_UNSET, privacy=_UNSET):
        """Replace notification and/or privacy settings. Partial dicts keep current values."""
        now = datetime.now(UTC)

        with atomic_change(self):
            if notifications is not _UNSET:
                current = self.notification_preferences or NotificationPreferences()
                self.notification_preferences = NotificationPreferences(
                    **{**current.to_dict(), **(notifications or {})}
                )
            if privacy is not _UNSET:
                current = self.privacy or PrivacySettings()
                self.privacy = PrivacySettings(**{**current.to_dict(), **(privacy or {})})
            self.updated_at = now

        self.raise_(PreferencesUpdated(user_id=str(self.id), updated_at=now))

    def to_public_dict(self):
        """Profile as shown to other members, honoring privacy settings."""
        privacy = self.privacy or PrivacySettings()
        data = {
            "user_id": str(self.id),
            "name": self.name,
            "image": self.image,
            "bio": self.bio,
            "pronouns": self.pronouns,
            "verified": self.verified,
            "role": self.role,
        }
        if privacy.show_email:
            data["email"] = self.email.address
        if privacy.show_location:
            data["location"] = {"city": self.city, "state": self.state, "country": self.country}
        if privacy.show_identities:
            data["identities"] = json.loads(self.identities) if self.identities else []
            data["accessibility_needs"] = json.loads(self.accessibility_needs) if self.accessibility_needs else []
        return data
