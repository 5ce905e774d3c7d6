"""ModerateReview: approve, reject, or flag a review.

Rejection and flagging need a reason; approval notes are optional.
"""

from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.review.review import ModerationAction, Review


@directory.command(part_of="Review")
class ModerateReview:
    review_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    action = String(required=True)  # "Approve", "Reject" or "Flag"
    reason = String()


@directory.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(ModerateReview)
    def moderate_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        action = ModerationAction(command.action)

        if action == ModerationAction.APPROVE:
            review.approve(moderator_id=command.moderator_id, notes=command.reason)
        else:
            if not command.reason:
                raise ValidationError({"reason": [f"Reason is required to {action.value.lower()} a review"]})
            if action == ModerationAction.REJECT:
                review.reject(moderator_id=command.moderator_id, reason=command.reason)
            else:
                review.flag(flagged_by=command.moderator_id, reason=command.reason)

        repo.add(review)
