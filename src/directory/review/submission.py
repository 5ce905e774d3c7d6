"""SubmitReview: submit a new review of a business.

Enforces one live review per member per business at handler level (the check
spans aggregates, so it needs a repository query). Removed reviews do not
count toward that limit.
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.business.business import Business
from directory.domain import directory
from directory.review.queries import find_reviews
from directory.review.review import Review


@directory.command(part_of="Review")
class SubmitReview:
    business_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    title = String(required=True, max_length=200)
    content = Text(required=True)
    visit_date = String(required=True, max_length=10)  # ISO date
    safety_rating = Text()  # JSON: {overall, accessibility, inclusivity, staff}
    photos = Text()  # JSON array of URLs
    identity_context = Text()  # JSON array of strings
    accessibility_context = Text()  # JSON array of strings


@directory.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        # Raises ObjectNotFoundError for unknown businesses
        current_domain.repository_for(Business).get(command.business_id)

        if find_reviews(business_id=command.business_id, user_id=command.user_id):
            raise ValidationError({"review": ["You have already reviewed this business"]})

        review = Review.submit(
            business_id=command.business_id,
            user_id=command.user_id,
            rating=command.rating,
            title=command.title,
            content=command.content,
            visit_date=command.visit_date,
            safety_rating=json.loads(command.safety_rating) if command.safety_rating else None,
            photos=json.loads(command.photos) if command.photos else None,
            identity_context=json.loads(command.identity_context) if command.identity_context else None,
            accessibility_context=(
                json.loads(command.accessibility_context) if command.accessibility_context else None
            ),
        )
        current_domain.repository_for(Review).add(review)
        return str(review.id)
