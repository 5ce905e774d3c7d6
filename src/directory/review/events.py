"""Domain events for the Review aggregate.

Every event carries ``business_id`` so the safety-score handler can rebuild
the parent business without loading the review.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from directory.domain import directory


@directory.event(part_of="Review")
class ReviewSubmitted:
    """A member submitted a new review of a business."""

    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    title = String(required=True)
    safety_overall = Integer(required=True)
    photo_count = Integer(default=0)
    submitted_at = DateTime(required=True)


@directory.event(part_of="Review")
class ReviewEdited:
    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    rating = Integer()
    title = String()
    content = Text()
    edited_at = DateTime(required=True)


@directory.event(part_of="Review")
class ReviewApproved:
    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    rating = Integer(required=True)
    moderator_id = Identifier(required=True)
    approved_at = DateTime(required=True)


@directory.event(part_of="Review")
class ReviewRejected:
    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    reason = String(required=True)
    rejected_at = DateTime(required=True)


@directory.event(part_of="Review")
class ReviewFlagged:
    """A review was pulled from public view pending another look."""

    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    flagged_by = String(required=True)  # moderator id
    reason = String()
    flagged_at = DateTime(required=True)


@directory.event(part_of="Review")
class ReviewVerified:
    """An external check (photo, receipt, check-in) corroborated the visit."""

    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    proof_type = String(required=True)
    verified_at = DateTime(required=True)


@directory.event(part_of="Review")
class ReviewVoted:
    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    voter_id = Identifier(required=True)
    vote_type = String(required=True)
    helpful = Integer(required=True)
    not_helpful = Integer(required=True)
    voted_at = DateTime(required=True)


@directory.event(part_of="Review")
class ReviewReported:
    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    reporter_id = Identifier(required=True)
    reason = String(required=True)
    report_count = Integer(required=True)
    reported_at = DateTime(required=True)


@directory.event(part_of="Review")
class BusinessResponded:
    """The business owner replied publicly to a review."""

    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    responded_by = Identifier(required=True)
    text = Text(required=True)
    responded_at = DateTime(required=True)


@directory.event(part_of="Review")
class ReviewRemoved:
    __version__ = 1

    review_id = Identifier(required=True)
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    removed_by = String(required=True)
    reason = String()
    removed_at = DateTime(required=True)
