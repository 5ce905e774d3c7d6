"""Keeping a business's safety score in step with its reviews.

Every review event re-scores the parent business. With synchronous event
processing this runs right after the review write commits, so the business
reflects the change by the time the review command returns.

RecalculateSafetyScore performs the same rebuild on demand, for repairing
listings whose derived fields drifted.
"""

import structlog
from protean.fields import Identifier
from protean.utils.mixins import handle

from directory.business.business import Business
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
from directory.scoring.stores import recompute_business_aggregate

logger = structlog.get_logger(__name__)


@directory.command(part_of="Business")
class RecalculateSafetyScore:
    business_id = Identifier(required=True)


@directory.command_handler(part_of=Business)
class RecalculateSafetyScoreHandler:
    @handle(RecalculateSafetyScore)
    def recalculate(self, command):
        aggregate = recompute_business_aggregate(command.business_id)
        if aggregate is None:
            return None
        return {
            "safety_score": aggregate.safety_score,
            "average_rating": aggregate.average_rating,
            "total_reviews": aggregate.total_reviews,
        }


@directory.event_handler(part_of=Business, stream_category="directory::review")
class ReviewEventsHandler:
    """Re-scores the parent business whenever one of its reviews changes."""

    def _rescore(self, event):
        logger.debug(
            "safety_score.triggered",
            business_id=str(event.business_id),
            review_id=str(event.review_id),
            trigger=type(event).__name__,
        )
        recompute_business_aggregate(event.business_id)

    @handle(ReviewSubmitted)
    def on_review_submitted(self, event: ReviewSubmitted) -> None:
        self._rescore(event)

    @handle(ReviewEdited)
    def on_review_edited(self, event: ReviewEdited) -> None:
        self._rescore(event)

    @handle(ReviewApproved)
    def on_review_approved(self, event: ReviewApproved) -> None:
        self._rescore(event)

    @handle(ReviewRejected)
    def on_review_rejected(self, event: ReviewRejected) -> None:
        self._rescore(event)

    @handle(ReviewFlagged)
    def on_review_flagged(self, event: ReviewFlagged) -> None:
        self._rescore(event)

    @handle(ReviewVerified)
    def on_review_verified(self, event: ReviewVerified) -> None:
        self._rescore(event)

    @handle(ReviewVoted)
    def on_review_voted(self, event: ReviewVoted) -> None:
        self._rescore(event)

    @handle(ReviewReported)
    def on_review_reported(self, event: ReviewReported) -> None:
        self._rescore(event)

    @handle(BusinessResponded)
    def on_business_responded(self, event: BusinessResponded) -> None:
        self._rescore(event)

    @handle(ReviewRemoved)
    def on_review_removed(self, event: ReviewRemoved) -> None:
        self._rescore(event)
