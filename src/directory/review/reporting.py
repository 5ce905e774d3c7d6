"""ReportReview: report a review for moderation.

Cannot report own review. Each member can report a review once.
"""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.review.review import Review


@directory.command(part_of="Review")
class ReportReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@directory.command_handler(part_of=Review)
class ReportReviewHandler:
    @handle(ReportReview)
    def report_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.report(user_id=command.user_id, reason=command.reason)

        repo.add(review)
