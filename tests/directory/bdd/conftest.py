"""Shared BDD fixtures and step definitions for safety scoring."""

import pytest
from directory.scoring.aggregator import ReviewSnapshot, recompute
from pytest_bdd import given, parsers, then, when

BUSINESS_ID = "biz-bdd"


class ReviewBook:
    """In-memory review and business stores for one scenario."""

    def __init__(self, business_id=BUSINESS_ID):
        self.business_id = business_id
        self.reviews = {business_id: []}
        self.aggregates = {business_id: None}

    def find_all_by_business_id(self, business_id):
        return list(self.reviews.get(business_id, []))

    def update_aggregate_fields(self, business_id, aggregate):
        if business_id not in self.aggregates:
            return False
        self.aggregates[business_id] = aggregate
        return True


@pytest.fixture()
def result():
    """Container for the last recompute result."""
    return {"aggregate": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a business with no reviews", target_fixture="book")
def business_with_no_reviews():
    return ReviewBook()


@given(parsers.cfparse("a verified review rated {rating:d}"))
def verified_review(book, rating):
    book.reviews[book.business_id].append(ReviewSnapshot(rating=rating, verified=True))


@given(parsers.cfparse("an unverified review rated {rating:d}"))
def unverified_review(book, rating):
    book.reviews[book.business_id].append(ReviewSnapshot(rating=rating, verified=False))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the safety score is recomputed")
def recompute_score(book, result):
    result["aggregate"] = recompute(book.business_id, review_store=book, business_store=book)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the safety score is {score:d}"))
def safety_score_is(book, score):
    assert book.aggregates[book.business_id].safety_score == score


@then(parsers.cfparse("the average rating is {rating:f}"))
def average_rating_is(book, rating):
    assert book.aggregates[book.business_id].average_rating == rating


@then(parsers.cfparse("the business has {count:d} reviews"))
def total_reviews_is(book, count):
    assert book.aggregates[book.business_id].total_reviews == count
