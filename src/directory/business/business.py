"""Business aggregate: a listing in the Safe Space directory.

A business is added by a community member or owner, moderated before it is
shown publicly, and carries three derived fields (safety score, average
rating, review count) that are owned by the safety-score aggregation and are
never edited directly.

Moderation state machine:
    PENDING  → APPROVED | REJECTED | FLAGGED
    APPROVED → FLAGGED
    FLAGGED  → APPROVED | REJECTED
    REJECTED → PENDING
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from directory.business.events import (
    BusinessModerated,
    BusinessRegistered,
    BusinessReported,
    BusinessSaved,
    BusinessUnsaved,
    SafetyScoreRecalculated,
)
from directory.domain import directory
from directory.shared.email import EmailAddress

MAX_IMAGES = 20

_PHONE_PATTERN = re.compile(r"^[\d\s\-\+\(\)]+$")
_WEBSITE_PATTERN = re.compile(r"^https?://.+")


class BusinessCategory(Enum):
    RESTAURANT = "Restaurant"
    CAFE = "Cafe"
    BAR = "Bar"
    HEALTHCARE = "Healthcare"
    FITNESS = "Fitness"
    EDUCATION = "Education"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    SERVICE = "Service"
    COMMUNITY_CENTER = "Community Center"
    COWORKING = "Coworking"
    LIBRARY = "Library"
    OTHER = "Other"


class BusinessStatus(Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    FLAGGED = "Flagged"


_VALID_TRANSITIONS = {
    BusinessStatus.PENDING: {BusinessStatus.APPROVED, BusinessStatus.REJECTED, BusinessStatus.FLAGGED},
    BusinessStatus.APPROVED: {BusinessStatus.FLAGGED},
    BusinessStatus.FLAGGED: {BusinessStatus.APPROVED, BusinessStatus.REJECTED},
    BusinessStatus.REJECTED: {BusinessStatus.PENDING},
}


@directory.value_object(part_of="Business")
class Address:
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(max_length=100, default="USA")


@directory.value_object(part_of="Business")
class GeoLocation:
    """Latitude/longitude of the business; both halves are required."""

    latitude = Float(min_value=-90.0, max_value=90.0)
    longitude = Float(min_value=-180.0, max_value=180.0)

    @invariant.post
    def both_coordinates_required(self):
        if self.latitude is None or self.longitude is None:
            raise ValidationError({"location": ["Both latitude and longitude are required"]})


@directory.aggregate
class Business:
    """A place listed in the directory, with its community-derived safety data."""

    # Listing
    name = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(required=True, choices=BusinessCategory)
    address = ValueObject(Address, required=True)
    location = ValueObject(GeoLocation, required=True)

    # Contact
    phone = String(max_length=30)
    website = String(max_length=500)
    email = ValueObject(EmailAddress)
    hours = Text()  # JSON: {"monday": {"open": "09:00", "close": "17:00", "closed": false}, ...}

    # Media and tags
    images = Text()  # JSON array of URLs
    verified_images = Text()  # JSON array of URLs
    accessibility_features = Text()  # JSON array of strings
    identity_features = Text()  # JSON array of strings
    neurodiversity_features = Text()  # JSON array of strings

    # Derived, maintained by the safety-score aggregation only
    safety_score = Integer(default=0, min_value=0, max_value=100)
    average_rating = Float(default=0.0, min_value=0.0, max_value=5.0)
    total_reviews = Integer(default=0, min_value=0)

    # Ownership and moderation
    verified = Boolean(default=False)
    status = String(choices=BusinessStatus, default=BusinessStatus.PENDING.value)
    added_by = Identifier(required=True)
    claimed_by = Identifier()
    last_verified = DateTime()

    # Engagement
    view_count = Integer(default=0, min_value=0)
    save_count = Integer(default=0, min_value=0)
    report_count = Integer(default=0, min_value=0)
    reported_by = Text()  # JSON: [{user_id, reason, reported_at}]

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def name_length(self):
        if self.name is not None and len(self.name.strip()) < 2:
            raise ValidationError({"name": ["Business name must be at least 2 characters"]})

    @invariant.post
    def description_length(self):
        if self.description is None:
            return
        length = len(self.description.strip())
        if length < 10:
            raise ValidationError({"description": ["Description must be at least 10 characters"]})
        if length > 2000:
            raise ValidationError({"description": ["Description cannot exceed 2000 characters"]})

    @invariant.post
    def phone_format(self):
        if self.phone and not _PHONE_PATTERN.match(self.phone):
            raise ValidationError({"phone": ["Please provide a valid phone number"]})

    @invariant.post
    def website_format(self):
        if self.website and not _WEBSITE_PATTERN.match(self.website):
            raise ValidationError({"website": ["Please provide a valid URL"]})

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if self.images and len(json.loads(self.images)) > MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES} images"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        name,
        description,
        category,
        address,
        latitude,
        longitude,
        added_by,
        phone=None,
        website=None,
        email=None,
        hours=None,
        images=None,
        accessibility_features=None,
        identity_features=None,
        neurodiversity_features=None,
    ):
        """Add a new listing. Safety fields start at zero and the listing awaits moderation."""
        now = datetime.now(UTC)

        business = cls(
            name=name.strip() if name else name,
            description=description,
            category=category,
            address=Address(**address),
            location=GeoLocation(latitude=latitude, longitude=longitude),
            phone=phone,
            website=website,
            email=EmailAddress.build(email) if email else None,
            hours=json.dumps(hours) if hours else None,
            images=json.dumps(images or []),
            verified_images=json.dumps([]),
            accessibility_features=json.dumps(accessibility_features or []),
            identity_features=json.dumps(identity_features or []),
            neurodiversity_features=json.dumps(neurodiversity_features or []),
            safety_score=0,
            average_rating=0.0,
            total_reviews=0,
            status=BusinessStatus.PENDING.value,
            added_by=added_by,
            view_count=0,
            save_count=0,
            report_count=0,
            reported_by=json.dumps([]),
            created_at=now,
            updated_at=now,
        )

        business.raise_(
            BusinessRegistered(
                business_id=str(business.id),
                name=business.name,
                category=category,
                city=business.address.city,
                added_by=str(added_by),
                registered_at=now,
            )
        )

        return business

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def moderate(self, moderator_id, status):
        current = BusinessStatus(self.status)
        target = BusinessStatus(status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            BusinessModerated(
                business_id=str(self.id),
                moderator_id=str(moderator_id),
                status=target.value,
                moderated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Engagement
    # -------------------------------------------------------------------
    def record_view(self):
        self.view_count = self.view_count + 1

    def add_save(self, user_id):
        now = datetime.now(UTC)
        self.save_count = self.save_count + 1
        self.updated_at = now

        self.raise_(
            BusinessSaved(
                business_id=str(self.id),
                user_id=str(user_id),
                save_count=self.save_count,
                saved_at=now,
            )
        )

    def remove_save(self, user_id):
        now = datetime.now(UTC)
        self.save_count = max(0, self.save_count - 1)
        self.updated_at = now

        self.raise_(
            BusinessUnsaved(
                business_id=str(self.id),
                user_id=str(user_id),
                save_count=self.save_count,
                unsaved_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------
    def report(self, user_id, reason):
        """Report the listing to moderators. Each member can report it once."""
        reporter = str(user_id)
        reports = json.loads(self.reported_by) if self.reported_by else []
        if any(r["user_id"] == reporter for r in reports):
            raise ValidationError({"report": ["You have already reported this business"]})

        now = datetime.now(UTC)
        reports.append({"user_id": reporter, "reason": reason, "reported_at": now.isoformat()})

        self.reported_by = json.dumps(reports)
        self.report_count = self.report_count + 1
        self.updated_at = now

        self.raise_(
            BusinessReported(
                business_id=str(self.id),
                reporter_id=reporter,
                reason=reason,
                report_count=self.report_count,
                reported_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Safety score
    # -------------------------------------------------------------------
    def apply_safety_aggregate(self, safety_score, average_rating, total_reviews):
        """Overwrite the derived fields with a freshly computed aggregate."""
        now = datetime.now(UTC)
        previous = self.safety_score
        self.safety_score = safety_score
        self.average_rating = average_rating
        self.total_reviews = total_reviews
        self.updated_at = now

        self.raise_(
            SafetyScoreRecalculated(
                business_id=str(self.id),
                safety_score=safety_score,
                previous_safety_score=previous,
                average_rating=average_rating,
                total_reviews=total_reviews,
                recalculated_at=now,
            )
        )

    def to_dict_summary(self):
        return {
            "business_id": str(self.id),
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "address": {
                "street": self.address.street,
                "city": self.address.city,
                "state": self.address.state,
                "zip_code": self.address.zip_code,
                "country": self.address.country,
            },
            "location": {"latitude": self.location.latitude, "longitude": self.location.longitude},
            "phone": self.phone,
            "website": self.website,
            "email": self.email.address if self.email else None,
            "images": json.loads(self.images) if self.images else [],
            "features": {
                "accessibility": json.loads(self.accessibility_features or "[]"),
                "identity": json.loads(self.identity_features or "[]"),
                "neurodiversity": json.loads(self.neurodiversity_features or "[]"),
            },
            "safety_score": self.safety_score,
            "average_rating": self.average_rating,
            "total_reviews": self.total_reviews,
            "verified": self.verified,
            "status": self.status,
            "view_count": self.view_count,
            "save_count": self.save_count,
            "report_count": self.report_count,
        }
