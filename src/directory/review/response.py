"""RespondToReview: the business posts its public reply."""

from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.review.review import Review


@directory.command(part_of="Review")
class RespondToReview:
    review_id = Identifier(required=True)
    responded_by = Identifier(required=True)
    text = Text(required=True)


@directory.command_handler(part_of=Review)
class RespondToReviewHandler:
    @handle(RespondToReview)
    def respond_to_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.respond(responded_by=command.responded_by, text=command.text)

        repo.add(review)
