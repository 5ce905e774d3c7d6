"""Safety-score aggregation for businesses.

A business carries three derived fields: ``safety_score`` (0-100),
``average_rating`` (0.0-5.0) and ``total_reviews``. They are a materialized
view over the business's reviews, rebuilt from scratch by :func:`recompute`
after every review mutation.

Scoring, for ``n`` counted reviews:

    average_rating = round_half_up(sum(ratings) / n, 1)
    raw            = positive / n * 100 - negative / n * 30
    bonus          = verified / n * 10
    safety_score   = round_half_up(clamp(raw + bonus, 0, 100))

where a review is *positive* when rated 4 or 5 and *negative* when rated 1
or 2. All arithmetic is done on exact fractions so that rounding never
depends on binary floating-point noise.

This module has no knowledge of Protean; storage is reached only through
the :class:`ReviewStore` and :class:`BusinessStore` interfaces.
"""

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from fractions import Fraction
from math import floor
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

POSITIVE_THRESHOLD = 4
NEGATIVE_THRESHOLD = 2
POSITIVE_WEIGHT = 100
NEGATIVE_WEIGHT = 30
VERIFIED_BONUS = 10
MIN_SAFETY_SCORE = 0
MAX_SAFETY_SCORE = 100


@dataclass(frozen=True)
class ReviewSnapshot:
    """The slice of a review that the aggregation reads."""

    rating: int
    verified: bool = False
    status: str | None = None


@dataclass(frozen=True)
class SafetyAggregate:
    """Derived fields written back onto a business."""

    safety_score: int
    average_rating: float
    total_reviews: int


EMPTY_AGGREGATE = SafetyAggregate(safety_score=0, average_rating=0.0, total_reviews=0)


class ReviewStore(Protocol):
    def find_all_by_business_id(self, business_id: str) -> list[ReviewSnapshot]: ...


class BusinessStore(Protocol):
    def update_aggregate_fields(self, business_id: str, aggregate: SafetyAggregate) -> bool:
        """Persist ``aggregate`` on the business. Return False if it does not exist."""
        ...


def round_half_up(value: Fraction, places: int = 0) -> Fraction:
    scale = 10**places
    return Fraction(floor(value * scale + Fraction(1, 2)), scale)


def compute_aggregate(reviews: Iterable[ReviewSnapshot]) -> SafetyAggregate:
    """Score a set of reviews. Pure; performs no I/O."""
    reviews = list(reviews)
    count = len(reviews)
    if count == 0:
        return EMPTY_AGGREGATE

    rating_sum = sum(review.rating for review in reviews)
    positive = sum(1 for review in reviews if review.rating >= POSITIVE_THRESHOLD)
    negative = sum(1 for review in reviews if review.rating <= NEGATIVE_THRESHOLD)
    verified = sum(1 for review in reviews if review.verified)

    score = Fraction(
        positive * POSITIVE_WEIGHT - negative * NEGATIVE_WEIGHT + verified * VERIFIED_BONUS,
        count,
    )
    score = min(Fraction(MAX_SAFETY_SCORE), max(Fraction(MIN_SAFETY_SCORE), score))

    return SafetyAggregate(
        safety_score=int(round_half_up(score)),
        average_rating=float(round_half_up(Fraction(rating_sum, count), places=1)),
        total_reviews=count,
    )


def select_counted(reviews: Iterable[ReviewSnapshot], counted_statuses: Collection[str] | None):
    """Filter reviews down to those that take part in scoring.

    ``None`` counts every review regardless of moderation status.
    """
    if counted_statuses is None:
        return list(reviews)
    return [review for review in reviews if review.status in counted_statuses]


def recompute(
    business_id: str,
    review_store: ReviewStore,
    business_store: BusinessStore,
    counted_statuses: Collection[str] | None = None,
) -> SafetyAggregate | None:
    """Rebuild and persist the derived safety fields of one business.

    Performs exactly one read of the review set followed by one write of the
    aggregate. A business that no longer exists is skipped silently; storage
    errors from either store propagate unchanged.

    Returns the aggregate that was written, or None when the business was
    not found.
    """
    reviews = select_counted(review_store.find_all_by_business_id(business_id), counted_statuses)
    aggregate = compute_aggregate(reviews)

    if not business_store.update_aggregate_fields(business_id, aggregate):
        logger.debug("safety_score.business_missing", business_id=str(business_id))
        return None

    logger.info(
        "safety_score.recomputed",
        business_id=str(business_id),
        safety_score=aggregate.safety_score,
        average_rating=aggregate.average_rating,
        total_reviews=aggregate.total_reviews,
    )
    return aggregate
