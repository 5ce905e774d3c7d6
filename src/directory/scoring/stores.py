"""Repository-backed stores for the safety-score aggregation.

These adapt Protean repositories to the two-operation contract that
:func:`directory.scoring.aggregator.recompute` expects, and must be used
inside an active domain context.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from directory.business.business import Business
from directory.review.queries import find_reviews
from directory.review.review import COUNTED_STATUSES
from directory.scoring.aggregator import ReviewSnapshot, SafetyAggregate, recompute


class RepositoryReviewStore:
    """Reads every live review of a business. Removed reviews are treated as deleted."""

    def find_all_by_business_id(self, business_id):
        return [
            ReviewSnapshot(rating=review.rating.score, verified=bool(review.verified), status=review.status)
            for review in find_reviews(business_id=business_id)
        ]


class RepositoryBusinessStore:
    def update_aggregate_fields(self, business_id, aggregate: SafetyAggregate) -> bool:
        repo = current_domain.repository_for(Business)
        try:
            business = repo.get(business_id)
        except ObjectNotFoundError:
            return False

        business.apply_safety_aggregate(
            safety_score=aggregate.safety_score,
            average_rating=aggregate.average_rating,
            total_reviews=aggregate.total_reviews,
        )
        repo.add(business)
        return True


def recompute_business_aggregate(business_id):
    """Re-score one business from its approved reviews."""
    return recompute(
        business_id,
        review_store=RepositoryReviewStore(),
        business_store=RepositoryBusinessStore(),
        counted_statuses=COUNTED_STATUSES,
    )
