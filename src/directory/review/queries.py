"""Read-side lookups over the Review repository."""

from protean.utils.globals import current_domain

from directory.review.review import Review, ReviewStatus
from directory.shared.paging import iter_all


def find_reviews(business_id=None, user_id=None, min_rating=None):
    """Return live (non-removed) reviews matching the filters, newest first.

    Pages through the repository so the result is complete regardless of the
    provider's default page size.
    """
    criteria = {}
    if business_id is not None:
        criteria["business_id"] = str(business_id)
    if user_id is not None:
        criteria["user_id"] = str(user_id)

    query = current_domain.repository_for(Review)._dao.query
    if criteria:
        query = query.filter(**criteria)

    reviews = [r for r in iter_all(query) if r.status != ReviewStatus.REMOVED.value]

    if min_rating is not None:
        reviews = [r for r in reviews if r.rating.score >= min_rating]

    reviews.sort(key=lambda r: r.created_at, reverse=True)
    return reviews
