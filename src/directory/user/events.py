"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from directory.domain import directory


@directory.event(part_of="User")
class UserRegistered:
    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    name = String(required=True)
    registered_at = DateTime(required=True)


@directory.event(part_of="User")
class PreferencesUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    updated_at = DateTime(required=True)
