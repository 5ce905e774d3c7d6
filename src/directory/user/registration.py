"""User registration and profile preferences: commands and handlers."""

import json

from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.shared.paging import iter_all
from directory.user.user import User


@directory.command(part_of="User")
class RegisterUser:
    name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    pronouns = String(max_length=50)
    bio = String(max_length=500)
    identities = Text()  # JSON array of strings
    accessibility_needs = Text()  # JSON array of strings
    city = String(max_length=100)
    state = String(max_length=100)
    country = String(max_length=100)


@directory.command(part_of="User")
class UpdatePreferences:
    user_id = Identifier(required=True)
    notifications = Text()  # JSON object of NotificationPreferences fields
    privacy = Text()  # JSON object of PrivacySettings fields


@directory.command_handler(part_of=User)
class UserProfileHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        user = User.register(
            name=command.name,
            email=command.email,
            pronouns=command.pronouns,
            bio=command.bio,
            identities=json.loads(command.identities) if command.identities else None,
            accessibility_needs=json.loads(command.accessibility_needs) if command.accessibility_needs else None,
            city=command.city,
            state=command.state,
            country=command.country,
        )

        # Emails are unique across members
        if any(member.email.address == user.email.address for member in iter_all(repo._dao.query)):
            raise ValidationError({"email": ["An account with this email already exists"]})

        repo.add(user)
        return str(user.id)

    @handle(UpdatePreferences)
    def update_preferences(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        kwargs = {}
        if command.notifications:
            kwargs["notifications"] = json.loads(command.notifications)
        if command.privacy:
            kwargs["privacy"] = json.loads(command.privacy)
        user.update_preferences(**kwargs)

        repo.add(user)
