"""EditReview: the author revises rating or content.

Only the author may edit. Editing an approved or rejected review sends it
back to moderation.
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.review.review import Review


@directory.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer()
    title = String(max_length=200)
    content = Text()
    safety_rating = Text()  # JSON: {overall, accessibility, inclusivity, staff}


@directory.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        if str(review.user_id) != str(command.user_id):
            raise ValidationError({"user_id": ["Only the author can edit a review"]})

        changes = {}
        if command.rating is not None:
            changes["rating"] = command.rating
        if command.title is not None:
            changes["title"] = command.title
        if command.content is not None:
            changes["content"] = command.content
        if command.safety_rating:
            changes["safety_rating"] = json.loads(command.safety_rating)

        review.edit(**changes)
        repo.add(review)
