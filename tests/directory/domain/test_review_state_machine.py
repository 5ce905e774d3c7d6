"""Tests for review moderation, removal and the status state machine."""

import pytest
from directory.review.events import ReviewApproved, ReviewFlagged, ReviewRejected, ReviewRemoved
from directory.review.review import Review, ReviewStatus
from protean.exceptions import ValidationError


def _pending_review():
    review = Review.submit(
        business_id="biz-sm",
        user_id="user-sm",
        rating=5,
        title="Great space",
        content="Quiet room available and staff were very patient with me.",
        visit_date="2024-03-10",
    )
    review._events.clear()
    return review


def _review_in(status):
    review = _pending_review()
    if status == ReviewStatus.APPROVED:
        review.approve(moderator_id="mod-001")
    elif status == ReviewStatus.REJECTED:
        review.reject(moderator_id="mod-001", reason="Spam")
    elif status == ReviewStatus.FLAGGED:
        review.flag(flagged_by="mod-001", reason="Check")
    elif status == ReviewStatus.REMOVED:
        review.remove(removed_by="Moderator")
    review._events.clear()
    return review


class TestModeration:
    def test_approve_pending(self):
        review = _pending_review()
        review.approve(moderator_id="mod-001", notes="Looks good")

        assert review.status == ReviewStatus.APPROVED.value
        assert review.moderation_notes == "Looks good"
        event = review._events[-1]
        assert isinstance(event, ReviewApproved)
        assert event.rating == 5

    def test_reject_pending(self):
        review = _pending_review()
        review.reject(moderator_id="mod-001", reason="Off topic")

        assert review.status == ReviewStatus.REJECTED.value
        assert review.moderation_notes == "Off topic"
        assert isinstance(review._events[-1], ReviewRejected)

    def test_flag_approved(self):
        review = _review_in(ReviewStatus.APPROVED)
        review.flag(flagged_by="mod-002", reason="Reported by members")

        assert review.status == ReviewStatus.FLAGGED.value
        assert isinstance(review._events[-1], ReviewFlagged)

    def test_flagged_can_be_approved_again(self):
        review = _review_in(ReviewStatus.FLAGGED)
        review.approve(moderator_id="mod-001")
        assert review.status == ReviewStatus.APPROVED.value

    def test_approved_cannot_be_rejected_directly(self):
        review = _review_in(ReviewStatus.APPROVED)
        with pytest.raises(ValidationError) as exc:
            review.reject(moderator_id="mod-001", reason="Changed mind")
        assert "Cannot transition from Approved to Rejected" in str(exc.value)

    def test_approved_cannot_be_approved_twice(self):
        review = _review_in(ReviewStatus.APPROVED)
        with pytest.raises(ValidationError):
            review.approve(moderator_id="mod-001")

    def test_rejected_cannot_be_approved(self):
        review = _review_in(ReviewStatus.REJECTED)
        with pytest.raises(ValidationError):
            review.approve(moderator_id="mod-001")


class TestRemoval:
    @pytest.mark.parametrize(
        "status",
        [ReviewStatus.PENDING, ReviewStatus.APPROVED, ReviewStatus.FLAGGED, ReviewStatus.REJECTED],
    )
    def test_any_live_review_can_be_removed(self, status):
        review = _review_in(status)
        review.remove(removed_by="Author", reason="Posted by mistake")

        assert review.status == ReviewStatus.REMOVED.value
        event = review._events[-1]
        assert isinstance(event, ReviewRemoved)
        assert event.business_id == "biz-sm"
        assert event.user_id == "user-sm"

    def test_removed_is_terminal(self):
        review = _review_in(ReviewStatus.REMOVED)
        with pytest.raises(ValidationError):
            review.approve(moderator_id="mod-001")
        with pytest.raises(ValidationError):
            review.remove(removed_by="Admin")

    def test_removed_review_cannot_be_edited(self):
        review = _review_in(ReviewStatus.REMOVED)
        with pytest.raises(ValidationError):
            review.edit(title="Back from the dead")
