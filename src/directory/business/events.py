"""Domain events for the Business aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from directory.domain import directory


@directory.event(part_of="Business")
class BusinessRegistered:
    """A new business listing was added to the directory."""

    __version__ = 1

    business_id = Identifier(required=True)
    name = String(required=True)
    category = String(required=True)
    city = String(required=True)
    added_by = Identifier(required=True)
    registered_at = DateTime(required=True)


@directory.event(part_of="Business")
class BusinessModerated:
    """A moderator changed the listing's status."""

    __version__ = 1

    business_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    status = String(required=True)
    moderated_at = DateTime(required=True)


@directory.event(part_of="Business")
class BusinessSaved:
    __version__ = 1

    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    save_count = Integer(required=True)
    saved_at = DateTime(required=True)


@directory.event(part_of="Business")
class BusinessUnsaved:
    __version__ = 1

    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    save_count = Integer(required=True)
    unsaved_at = DateTime(required=True)


@directory.event(part_of="Business")
class SafetyScoreRecalculated:
    """The derived safety fields were rebuilt from the business's reviews."""

    __version__ = 1

    business_id = Identifier(required=True)
    safety_score = Integer(required=True)
    previous_safety_score = Integer()
    average_rating = Float(required=True)
    total_reviews = Integer(required=True)
    recalculated_at = DateTime(required=True)


@directory.event(part_of="Business")
class BusinessReported:
    """A member reported the listing to moderators."""

    __version__ = 1

    business_id = Identifier(required=True)
    reporter_id = Identifier(required=True)
    reason = String(required=True)
    report_count = Integer(required=True)
    reported_at = DateTime(required=True)
