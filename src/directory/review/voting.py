"""VoteOnReview: mark a review helpful or not helpful."""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.review.review import Review


@directory.command(part_of="Review")
class VoteOnReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    vote_type = String(required=True)  # "Helpful" or "NotHelpful"


@directory.command_handler(part_of=Review)
class VoteOnReviewHandler:
    @handle(VoteOnReview)
    def vote_on_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.vote(user_id=command.user_id, vote_type=command.vote_type)

        repo.add(review)
