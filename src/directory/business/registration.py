"""RegisterBusiness: add a new listing to the directory."""

import json

from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.business.business import Business
from directory.domain import directory


@directory.command(part_of="Business")
class RegisterBusiness:
    name = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(max_length=100)
    latitude = Float(required=True)
    longitude = Float(required=True)
    added_by = Identifier(required=True)
    phone = String(max_length=30)
    website = String(max_length=500)
    email = String(max_length=254)
    hours = Text()  # JSON object
    images = Text()  # JSON array of URLs
    accessibility_features = Text()  # JSON array of strings
    identity_features = Text()  # JSON array of strings
    neurodiversity_features = Text()  # JSON array of strings


def _loads(raw):
    return json.loads(raw) if raw else None


@directory.command_handler(part_of=Business)
class RegisterBusinessHandler:
    @handle(RegisterBusiness)
    def register_business(self, command):
        address = {
            "street": command.street,
            "city": command.city,
            "state": command.state,
            "zip_code": command.zip_code,
        }
        if command.country:
            address["country"] = command.country

        business = Business.register(
            name=command.name,
            description=command.description,
            category=command.category,
            address=address,
            latitude=command.latitude,
            longitude=command.longitude,
            added_by=command.added_by,
            phone=command.phone,
            website=command.website,
            email=command.email,
            hours=_loads(command.hours),
            images=_loads(command.images),
            accessibility_features=_loads(command.accessibility_features),
            identity_features=_loads(command.identity_features),
            neurodiversity_features=_loads(command.neurodiversity_features),
        )
        current_domain.repository_for(Business).add(business)
        return str(business.id)
