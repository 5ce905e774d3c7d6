"""RemoveReview: take a review out of the directory.

Removal is performed by the author, a moderator, or an admin. The review
becomes a tombstone and the parent business is re-scored without it.
"""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.review.review import Review


@directory.command(part_of="Review")
class RemoveReview:
    review_id = Identifier(required=True)
    removed_by = String(required=True)  # "Author", "Moderator", "Admin"
    reason = String()


@directory.command_handler(part_of=Review)
class RemoveReviewHandler:
    @handle(RemoveReview)
    def remove_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.remove(removed_by=command.removed_by, reason=command.reason)

        repo.add(review)
