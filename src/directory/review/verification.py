"""VerifyReview: record that an external check corroborated the visit.

Called by the verification process (photo, receipt, or check-in review),
never by the review's author.
"""

import json

from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.review.review import Review


@directory.command(part_of="Review")
class VerifyReview:
    review_id = Identifier(required=True)
    proof_type = String(required=True)  # ProofType value
    photos = Text()  # JSON array of verified photo URLs


@directory.command_handler(part_of=Review)
class VerifyReviewHandler:
    @handle(VerifyReview)
    def verify_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.verify(
            proof_type=command.proof_type,
            photos=json.loads(command.photos) if command.photos else None,
        )

        repo.add(review)
