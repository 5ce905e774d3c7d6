"""Tests for the safety-score aggregation (pure computation and recompute)."""

from fractions import Fraction
from itertools import product

import pytest
from directory.scoring.aggregator import (
    EMPTY_AGGREGATE,
    ReviewSnapshot,
    SafetyAggregate,
    compute_aggregate,
    recompute,
    round_half_up,
    select_counted,
)


class InMemoryReviewStore:
    def __init__(self, reviews=None, calls=None):
        self.reviews = dict(reviews or {})
        self.calls = calls if calls is not None else []

    def find_all_by_business_id(self, business_id):
        self.calls.append(("read", business_id))
        return list(self.reviews.get(business_id, []))


class InMemoryBusinessStore:
    def __init__(self, business_ids=(), calls=None):
        self.records = {business_id: None for business_id in business_ids}
        self.calls = calls if calls is not None else []

    def update_aggregate_fields(self, business_id, aggregate):
        self.calls.append(("write", business_id))
        if business_id not in self.records:
            return False
        self.records[business_id] = aggregate
        return True


class ExplodingStore:
    def find_all_by_business_id(self, business_id):
        raise ConnectionError("review store unavailable")

    def update_aggregate_fields(self, business_id, aggregate):
        raise ConnectionError("business store unavailable")


def _reviews(*specs):
    """Build snapshots from (rating, verified) pairs."""
    return [ReviewSnapshot(rating=rating, verified=verified) for rating, verified in specs]


class TestRoundHalfUp:
    def test_half_rounds_up_at_integer_precision(self):
        assert round_half_up(Fraction(5, 2)) == 3

    def test_half_rounds_up_at_one_decimal(self):
        assert round_half_up(Fraction(425, 100), places=1) == Fraction(43, 10)

    def test_below_half_rounds_down(self):
        assert round_half_up(Fraction(444, 100), places=1) == Fraction(44, 10)


class TestComputeAggregate:
    def test_no_reviews_yields_zeroes(self):
        assert compute_aggregate([]) == EMPTY_AGGREGATE
        assert EMPTY_AGGREGATE == SafetyAggregate(safety_score=0, average_rating=0.0, total_reviews=0)

    def test_two_verified_five_star_reviews_are_clamped_to_100(self):
        aggregate = compute_aggregate(_reviews((5, True), (5, True)))
        assert aggregate.safety_score == 100
        assert aggregate.average_rating == 5.0
        assert aggregate.total_reviews == 2

    def test_mixed_reviews(self):
        aggregate = compute_aggregate(_reviews((5, False), (1, False), (3, True)))
        # (100 - 30 + 10) / 3 = 26.67
        assert aggregate.safety_score == 27
        assert aggregate.average_rating == 3.0
        assert aggregate.total_reviews == 3

    def test_all_one_star_reviews_are_clamped_to_zero(self):
        aggregate = compute_aggregate(_reviews((1, False), (1, False)))
        assert aggregate.safety_score == 0
        assert aggregate.average_rating == 1.0
        assert aggregate.total_reviews == 2

    def test_four_and_five_star_reviews_with_one_verified(self):
        aggregate = compute_aggregate(_reviews((4, True), (5, False), (4, False), (2, False)))
        # (300 - 30 + 10) / 4 = 70
        assert aggregate.safety_score == 70
        assert aggregate.average_rating == 3.8

    def test_ten_verified_reviews_mostly_positive(self):
        reviews = _reviews(*([(5, True)] * 4 + [(4, True)] * 4 + [(1, True)] + [(3, True)]))
        aggregate = compute_aggregate(reviews)
        # (800 - 30 + 100) / 10 = 87
        assert aggregate.safety_score == 87
        assert aggregate.average_rating == 4.0
        assert aggregate.total_reviews == 10

    def test_neutral_rating_is_neither_positive_nor_negative(self):
        aggregate = compute_aggregate(_reviews((3, False)))
        assert aggregate.safety_score == 0
        assert aggregate.average_rating == 3.0
        assert aggregate.total_reviews == 1

    def test_two_one_star_reviews_and_one_five_star(self):
        aggregate = compute_aggregate(_reviews((1, False), (1, False), (5, False)))
        # (100 - 60) / 3 = 13.33
        assert aggregate.safety_score == 13
        assert aggregate.average_rating == 2.3
        assert aggregate.total_reviews == 3

    def test_verified_neutral_rating_earns_only_the_bonus(self):
        aggregate = compute_aggregate(_reviews((3, True)))
        assert aggregate.safety_score == 10
        assert aggregate.average_rating == 3.0
        assert aggregate.total_reviews == 1

    def test_safety_score_rounds_half_up(self):
        # 10 / 4 = 2.5
        aggregate = compute_aggregate(_reviews((3, True), (3, False), (3, False), (3, False)))
        assert aggregate.safety_score == 3

    def test_average_rating_rounds_half_up(self):
        # 85 / 20 = 4.25
        aggregate = compute_aggregate(_reviews(*([(5, False)] * 5 + [(4, False)] * 15)))
        assert aggregate.average_rating == 4.3

    def test_average_rating_is_one_decimal(self):
        aggregate = compute_aggregate(_reviews((1, False), (2, False), (2, False)))
        assert aggregate.average_rating == 1.7

    def test_order_does_not_matter(self):
        reviews = _reviews((5, True), (2, False), (4, False), (1, True))
        assert compute_aggregate(reviews) == compute_aggregate(list(reversed(reviews)))


class TestAggregateBounds:
    @pytest.mark.parametrize("size", [1, 2, 3])
    def test_every_combination_stays_in_range(self, size):
        for ratings in product(range(1, 6), repeat=size):
            for flags in product((False, True), repeat=size):
                aggregate = compute_aggregate(
                    [ReviewSnapshot(rating=r, verified=v) for r, v in zip(ratings, flags, strict=True)]
                )
                assert 0 <= aggregate.safety_score <= 100
                assert isinstance(aggregate.safety_score, int)
                assert 1.0 <= aggregate.average_rating <= 5.0
                assert aggregate.total_reviews == size

    def test_verifying_a_review_never_lowers_the_score(self):
        ratings = [5, 5, 4, 2, 3]
        scores = []
        for verified_count in range(len(ratings) + 1):
            reviews = [
                ReviewSnapshot(rating=rating, verified=index < verified_count) for index, rating in enumerate(ratings)
            ]
            scores.append(compute_aggregate(reviews).safety_score)
        assert scores == sorted(scores)


class TestSelectCounted:
    def test_none_counts_everything(self):
        reviews = [ReviewSnapshot(rating=5, status="Pending"), ReviewSnapshot(rating=1, status="Approved")]
        assert select_counted(reviews, None) == reviews

    def test_filters_by_status(self):
        approved = ReviewSnapshot(rating=1, status="Approved")
        reviews = [ReviewSnapshot(rating=5, status="Pending"), approved, ReviewSnapshot(rating=4, status="Flagged")]
        assert select_counted(reviews, {"Approved"}) == [approved]


class TestRecompute:
    def test_writes_aggregate_to_business(self):
        reviews = InMemoryReviewStore({"biz-1": _reviews((5, True), (5, True))})
        businesses = InMemoryBusinessStore(["biz-1"])

        result = recompute("biz-1", reviews, businesses)

        assert result == SafetyAggregate(safety_score=100, average_rating=5.0, total_reviews=2)
        assert businesses.records["biz-1"] == result

    def test_reads_once_then_writes_once(self):
        calls = []
        reviews = InMemoryReviewStore({"biz-1": _reviews((4, False))}, calls=calls)
        businesses = InMemoryBusinessStore(["biz-1"], calls=calls)

        recompute("biz-1", reviews, businesses)

        assert calls == [("read", "biz-1"), ("write", "biz-1")]

    def test_business_without_reviews_is_reset_to_zero(self):
        businesses = InMemoryBusinessStore(["biz-1"])
        businesses.records["biz-1"] = SafetyAggregate(safety_score=80, average_rating=4.5, total_reviews=3)

        recompute("biz-1", InMemoryReviewStore(), businesses)

        assert businesses.records["biz-1"] == EMPTY_AGGREGATE

    def test_missing_business_is_skipped(self):
        businesses = InMemoryBusinessStore(["biz-other"])

        result = recompute("biz-gone", InMemoryReviewStore({"biz-gone": _reviews((5, False))}), businesses)

        assert result is None
        assert businesses.records == {"biz-other": None}

    def test_recompute_is_idempotent(self):
        reviews = InMemoryReviewStore({"biz-1": _reviews((5, True), (2, False), (4, False))})
        businesses = InMemoryBusinessStore(["biz-1"])

        first = recompute("biz-1", reviews, businesses)
        second = recompute("biz-1", reviews, businesses)

        assert first == second
        assert businesses.records["biz-1"] == first

    def test_deleted_review_drops_out(self):
        reviews = InMemoryReviewStore({"biz-1": _reviews((5, True), (5, True), (2, False))})
        businesses = InMemoryBusinessStore(["biz-1"])

        before = recompute("biz-1", reviews, businesses)
        assert before.total_reviews == 3
        # (200 - 30 + 20) / 3 = 63.33
        assert before.safety_score == 63

        reviews.reviews["biz-1"].pop(0)
        after = recompute("biz-1", reviews, businesses)

        # (100 - 30 + 10) / 2 = 40
        assert after == SafetyAggregate(safety_score=40, average_rating=3.5, total_reviews=2)
        assert businesses.records["biz-1"] == after

    def test_other_businesses_are_untouched(self):
        reviews = InMemoryReviewStore({"biz-1": _reviews((5, False)), "biz-2": _reviews((1, False))})
        businesses = InMemoryBusinessStore(["biz-1", "biz-2"])

        recompute("biz-1", reviews, businesses)

        assert businesses.records["biz-2"] is None

    def test_counted_statuses_filter_reviews(self):
        reviews = InMemoryReviewStore(
            {
                "biz-1": [
                    ReviewSnapshot(rating=5, verified=True, status="Approved"),
                    ReviewSnapshot(rating=1, status="Pending"),
                    ReviewSnapshot(rating=1, status="Rejected"),
                ]
            }
        )
        businesses = InMemoryBusinessStore(["biz-1"])

        result = recompute("biz-1", reviews, businesses, counted_statuses={"Approved"})

        assert result == SafetyAggregate(safety_score=100, average_rating=5.0, total_reviews=1)

    def test_review_store_errors_propagate(self):
        businesses = InMemoryBusinessStore(["biz-1"])
        with pytest.raises(ConnectionError):
            recompute("biz-1", ExplodingStore(), businesses)
        assert businesses.calls == []

    def test_business_store_errors_propagate(self):
        reviews = InMemoryReviewStore({"biz-1": _reviews((5, False))})
        with pytest.raises(ConnectionError):
            recompute("biz-1", reviews, ExplodingStore())
