"""Review aggregate: a member's account of how safe and welcoming a business felt.

Reviews are moderated before they count toward a business's safety score,
can be corroborated by an external verification step, collect helpful votes
and reports from other members, and may carry one public response from the
business.

State Machine:
    PENDING  → APPROVED | REJECTED | FLAGGED | REMOVED
    APPROVED → FLAGGED | PENDING (content edited) | REMOVED
    FLAGGED  → APPROVED | REJECTED | REMOVED
    REJECTED → PENDING (re-submit after edit) | REMOVED
    REMOVED  → (terminal)

REMOVED is a tombstone: removed reviews are invisible to queries and to the
safety-score aggregation, and free the (business, user) slot for a new review.
"""

import json
from datetime import UTC, date, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    Date,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from directory.domain import directory
from directory.review.events import (
    BusinessResponded,
    ReviewApproved,
    ReviewEdited,
    ReviewFlagged,
    ReviewRejected,
    ReviewRemoved,
    ReviewReported,
    ReviewSubmitted,
    ReviewVerified,
    ReviewVoted,
)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

MAX_PHOTOS = 10


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ReviewStatus(Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    FLAGGED = "Flagged"
    REMOVED = "Removed"


class ModerationAction(Enum):
    APPROVE = "Approve"
    REJECT = "Reject"
    FLAG = "Flag"


class VoteType(Enum):
    HELPFUL = "Helpful"
    NOT_HELPFUL = "NotHelpful"


class ProofType(Enum):
    PHOTO = "Photo"
    RECEIPT = "Receipt"
    CHECK_IN = "CheckIn"


# Only these take part in a business's safety score
COUNTED_STATUSES = frozenset({ReviewStatus.APPROVED.value})


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    ReviewStatus.PENDING: {
        ReviewStatus.APPROVED,
        ReviewStatus.REJECTED,
        ReviewStatus.FLAGGED,
        ReviewStatus.REMOVED,
    },
    ReviewStatus.APPROVED: {ReviewStatus.FLAGGED, ReviewStatus.PENDING, ReviewStatus.REMOVED},
    ReviewStatus.FLAGGED: {ReviewStatus.APPROVED, ReviewStatus.REJECTED, ReviewStatus.REMOVED},
    ReviewStatus.REJECTED: {ReviewStatus.PENDING, ReviewStatus.REMOVED},
    ReviewStatus.REMOVED: set(),
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@directory.value_object(part_of="Review")
class Rating:
    """A star rating from 1 to 5."""

    score = Integer(required=True)

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and (self.score < 1 or self.score > 5):
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})


@directory.value_object(part_of="Review")
class SafetyRating:
    """How safe the visit felt, overall and along optional axes (each 1-5)."""

    overall = Integer(required=True)
    accessibility = Integer()
    inclusivity = Integer()
    staff = Integer()

    @invariant.post
    def axes_must_be_in_range(self):
        for axis in ("overall", "accessibility", "inclusivity", "staff"):
            value = getattr(self, axis)
            if value is not None and (value < 1 or value > 5):
                raise ValidationError({f"safety_rating.{axis}": ["Safety ratings must be between 1 and 5"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@directory.entity(part_of="Review")
class BusinessResponse:
    """The business's public reply to a review."""

    text = Text(required=True)
    responded_by = Identifier(required=True)
    responded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@directory.aggregate
class Review:
    """A member's review of a business."""

    # Core identifiers
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)

    # Content
    rating = ValueObject(Rating, required=True)
    safety_rating = ValueObject(SafetyRating, required=True)
    title = String(required=True, max_length=200)
    content = Text(required=True)
    visit_date = Date(required=True)
    identity_context = Text()  # JSON array of strings
    accessibility_context = Text()  # JSON array of strings

    # Media
    photos = Text()  # JSON array of URLs
    verified_photos = Text()  # JSON array of URLs

    # Verification
    verified = Boolean(default=False)
    proof_type = String(choices=ProofType)
    verified_at = DateTime()

    # Status
    status = String(choices=ReviewStatus, default=ReviewStatus.PENDING.value)
    moderation_notes = Text()

    # Voting
    helpful = Integer(default=0, min_value=0)
    not_helpful = Integer(default=0, min_value=0)
    helpful_by = Text()  # JSON array of user ids
    not_helpful_by = Text()  # JSON array of user ids

    # Reporting
    report_count = Integer(default=0, min_value=0)
    reported_by = Text()  # JSON: [{user_id, reason, reported_at}]

    # Business engagement
    response = HasMany(BusinessResponse)

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def title_length(self):
        if self.title is not None and len(self.title.strip()) < 5:
            raise ValidationError({"title": ["Title must be at least 5 characters"]})

    @invariant.post
    def content_length(self):
        if self.content is None:
            return
        length = len(self.content.strip())
        if length < 20:
            raise ValidationError({"content": ["Review must be at least 20 characters"]})
        if length > 5000:
            raise ValidationError({"content": ["Review cannot exceed 5000 characters"]})

    @invariant.post
    def photos_cannot_exceed_maximum(self):
        if self.photos and len(json.loads(self.photos)) > MAX_PHOTOS:
            raise ValidationError({"photos": [f"Cannot have more than {MAX_PHOTOS} photos"]})

    @invariant.post
    def visit_date_not_in_future(self):
        if self.visit_date and self.visit_date > datetime.now(UTC).date():
            raise ValidationError({"visit_date": ["Visit date cannot be in the future"]})

    @invariant.post
    def at_most_one_response(self):
        if len(self.response) > 1:
            raise ValidationError({"response": ["A review can have at most one business response"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        business_id,
        user_id,
        rating,
        title,
        content,
        visit_date,
        safety_rating=None,
        photos=None,
        identity_context=None,
        accessibility_context=None,
    ):
        """Submit a new review. It stays out of the safety score until approved.

        ``safety_rating`` is a dict of axis scores; ``overall`` defaults to the
        star rating when not given.
        """
        now = datetime.now(UTC)
        if isinstance(visit_date, str):
            visit_date = date.fromisoformat(visit_date)

        safety = dict(safety_rating or {})
        safety.setdefault("overall", rating)

        review = cls(
            business_id=business_id,
            user_id=user_id,
            rating=Rating(score=rating),
            safety_rating=SafetyRating(**safety),
            title=title.strip() if title else title,
            content=content,
            visit_date=visit_date,
            identity_context=json.dumps(identity_context or []),
            accessibility_context=json.dumps(accessibility_context or []),
            photos=json.dumps(photos or []),
            verified_photos=json.dumps([]),
            verified=False,
            status=ReviewStatus.PENDING.value,
            helpful=0,
            not_helpful=0,
            helpful_by=json.dumps([]),
            not_helpful_by=json.dumps([]),
            report_count=0,
            reported_by=json.dumps([]),
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                business_id=str(business_id),
                user_id=str(user_id),
                rating=rating,
                title=review.title,
                safety_overall=safety["overall"],
                photo_count=len(photos) if photos else 0,
                submitted_at=now,
            )
        )

        return review

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = ReviewStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_live(self):
        if ReviewStatus(self.status) == ReviewStatus.REMOVED:
            raise ValidationError({"status": ["Review has been removed"]})

    # -------------------------------------------------------------------
    # Edit
    # -------------------------------------------------------------------
    def edit(self, rating=_UNSET, title=_UNSET, content=_UNSET, safety_rating=_UNSET):
        """Edit review content.

        Allowed while Pending, Approved or Rejected. Approved and Rejected
        reviews go back to Pending for another round of moderation.
        """
        current = ReviewStatus(self.status)
        if current not in (ReviewStatus.PENDING, ReviewStatus.APPROVED, ReviewStatus.REJECTED):
            raise ValidationError({"status": [f"Reviews cannot be edited in {current.value} status"]})

        now = datetime.now(UTC)

        with atomic_change(self):
            if rating is not _UNSET:
                self.rating = Rating(score=rating)
            if title is not _UNSET:
                self.title = title
            if content is not _UNSET:
                self.content = content
            if safety_rating is not _UNSET:
                self.safety_rating = SafetyRating(**safety_rating)
            self.updated_at = now

            if current != ReviewStatus.PENDING:
                self.status = ReviewStatus.PENDING.value

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                business_id=str(self.business_id),
                rating=self.rating.score,
                title=self.title,
                content=self.content,
                edited_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def approve(self, moderator_id, notes=None):
        self._assert_can_transition(ReviewStatus.APPROVED)

        now = datetime.now(UTC)
        self.status = ReviewStatus.APPROVED.value
        self.moderation_notes = notes
        self.updated_at = now

        self.raise_(
            ReviewApproved(
                review_id=str(self.id),
                business_id=str(self.business_id),
                rating=self.rating.score,
                moderator_id=str(moderator_id),
                approved_at=now,
            )
        )

    def reject(self, moderator_id, reason):
        self._assert_can_transition(ReviewStatus.REJECTED)

        now = datetime.now(UTC)
        self.status = ReviewStatus.REJECTED.value
        self.moderation_notes = reason
        self.updated_at = now

        self.raise_(
            ReviewRejected(
                review_id=str(self.id),
                business_id=str(self.business_id),
                moderator_id=str(moderator_id),
                reason=reason,
                rejected_at=now,
            )
        )

    def flag(self, flagged_by, reason=None):
        self._assert_can_transition(ReviewStatus.FLAGGED)

        now = datetime.now(UTC)
        self.status = ReviewStatus.FLAGGED.value
        self.moderation_notes = reason
        self.updated_at = now

        self.raise_(
            ReviewFlagged(
                review_id=str(self.id),
                business_id=str(self.business_id),
                flagged_by=str(flagged_by),
                reason=reason,
                flagged_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------
    def verify(self, proof_type, photos=None):
        """Mark the review as corroborated by an external proof."""
        self._assert_live()
        if self.verified:
            raise ValidationError({"verified": ["Review is already verified"]})

        now = datetime.now(UTC)
        proof = ProofType(proof_type)

        with atomic_change(self):
            self.verified = True
            self.proof_type = proof.value
            self.verified_at = now
            if photos:
                existing = json.loads(self.verified_photos) if self.verified_photos else []
                self.verified_photos = json.dumps(existing + list(photos))
            self.updated_at = now

        self.raise_(
            ReviewVerified(
                review_id=str(self.id),
                business_id=str(self.business_id),
                proof_type=proof.value,
                verified_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Voting
    # -------------------------------------------------------------------
    def vote(self, user_id, vote_type):
        """Record a helpful / not-helpful vote.

        Members cannot vote on their own review or cast the same vote twice.
        Switching sides moves the vote from one counter to the other.
        """
        self._assert_live()
        voter = str(user_id)
        if voter == str(self.user_id):
            raise ValidationError({"vote": ["Cannot vote on your own review"]})

        helpful_by = json.loads(self.helpful_by) if self.helpful_by else []
        not_helpful_by = json.loads(self.not_helpful_by) if self.not_helpful_by else []
        kind = VoteType(vote_type)

        if kind == VoteType.HELPFUL:
            if voter in helpful_by:
                raise ValidationError({"vote": ["You have already marked this review as helpful"]})
            helpful_by.append(voter)
            if voter in not_helpful_by:
                not_helpful_by.remove(voter)
        else:
            if voter in not_helpful_by:
                raise ValidationError({"vote": ["You have already marked this review as not helpful"]})
            not_helpful_by.append(voter)
            if voter in helpful_by:
                helpful_by.remove(voter)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.helpful_by = json.dumps(helpful_by)
            self.not_helpful_by = json.dumps(not_helpful_by)
            self.helpful = len(helpful_by)
            self.not_helpful = len(not_helpful_by)
            self.updated_at = now

        self.raise_(
            ReviewVoted(
                review_id=str(self.id),
                business_id=str(self.business_id),
                voter_id=voter,
                vote_type=kind.value,
                helpful=self.helpful,
                not_helpful=self.not_helpful,
                voted_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------
    def report(self, user_id, reason):
        """Report a review to moderators. Once per member, never your own."""
        self._assert_live()
        reporter = str(user_id)
        if reporter == str(self.user_id):
            raise ValidationError({"report": ["Cannot report your own review"]})

        reports = json.loads(self.reported_by) if self.reported_by else []
        if any(r["user_id"] == reporter for r in reports):
            raise ValidationError({"report": ["You have already reported this review"]})

        now = datetime.now(UTC)
        reports.append({"user_id": reporter, "reason": reason, "reported_at": now.isoformat()})

        self.reported_by = json.dumps(reports)
        self.report_count = self.report_count + 1
        self.updated_at = now

        self.raise_(
            ReviewReported(
                review_id=str(self.id),
                business_id=str(self.business_id),
                reporter_id=reporter,
                reason=reason,
                report_count=self.report_count,
                reported_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Business response
    # -------------------------------------------------------------------
    def respond(self, responded_by, text):
        """Attach the business's public reply. Only one reply, only on approved reviews."""
        if ReviewStatus(self.status) != ReviewStatus.APPROVED:
            raise ValidationError({"response": ["Businesses can only respond to approved reviews"]})

        if self.response:
            raise ValidationError({"response": ["A review can have at most one business response"]})

        now = datetime.now(UTC)
        self.add_response(BusinessResponse(text=text, responded_by=responded_by, responded_at=now))
        self.updated_at = now

        self.raise_(
            BusinessResponded(
                review_id=str(self.id),
                business_id=str(self.business_id),
                responded_by=str(responded_by),
                text=text,
                responded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------
    def remove(self, removed_by, reason=None):
        self._assert_can_transition(ReviewStatus.REMOVED)

        now = datetime.now(UTC)
        self.status = ReviewStatus.REMOVED.value
        self.moderation_notes = reason
        self.updated_at = now

        self.raise_(
            ReviewRemoved(
                review_id=str(self.id),
                business_id=str(self.business_id),
                user_id=str(self.user_id),
                removed_by=removed_by,
                reason=reason,
                removed_at=now,
            )
        )

    def to_dict_view(self):
        """Public representation returned by the API."""
        response = self.response[0] if self.response else None
        return {
            "review_id": str(self.id),
            "business_id": str(self.business_id),
            "user_id": str(self.user_id),
            "rating": self.rating.score,
            "safety_rating": {
                "overall": self.safety_rating.overall,
                "accessibility": self.safety_rating.accessibility,
                "inclusivity": self.safety_rating.inclusivity,
                "staff": self.safety_rating.staff,
            },
            "title": self.title,
            "content": self.content,
            "visit_date": self.visit_date.isoformat() if self.visit_date else None,
            "photos": json.loads(self.photos) if self.photos else [],
            "identity_context": json.loads(self.identity_context) if self.identity_context else [],
            "accessibility_context": json.loads(self.accessibility_context) if self.accessibility_context else [],
            "verified": self.verified,
            "status": self.status,
            "helpful": self.helpful,
            "not_helpful": self.not_helpful,
            "report_count": self.report_count,
            "response": (
                {
                    "text": response.text,
                    "responded_by": str(response.responded_by),
                    "responded_at": response.responded_at.isoformat(),
                }
                if response
                else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
