"""Read-side search over the Business repository."""

import json

from protean.utils.globals import current_domain

from directory.business.business import Business
from directory.shared.paging import iter_all

_FEATURE_FIELDS = ("accessibility_features", "identity_features", "neurodiversity_features")


def _features_of(business):
    tags = set()
    for field in _FEATURE_FIELDS:
        tags.update(tag.lower() for tag in json.loads(getattr(business, field) or "[]"))
    return tags


def _matches_text(business, needle):
    haystacks = (business.name, business.category, business.description)
    return any(needle in (text or "").lower() for text in haystacks)


def find_businesses(query=None, category=None, features=None, min_safety_score=None, city=None, status=None):
    """Search the directory, safest listings first.

    ``query`` is a case-insensitive substring match over name, category and
    description. ``features`` matches a listing carrying any one of the
    given tags. ``city`` compares case-insensitively.
    """
    criteria = {}
    if category:
        criteria["category"] = category
    if status:
        criteria["status"] = status

    source = current_domain.repository_for(Business)._dao.query
    if criteria:
        source = source.filter(**criteria)

    businesses = list(iter_all(source))

    if query:
        needle = query.strip().lower()
        businesses = [b for b in businesses if _matches_text(b, needle)]
    if features:
        wanted = {feature.strip().lower() for feature in features if feature.strip()}
        if wanted:
            businesses = [b for b in businesses if wanted & _features_of(b)]
    if min_safety_score is not None:
        businesses = [b for b in businesses if b.safety_score >= min_safety_score]
    if city:
        businesses = [b for b in businesses if b.address.city.lower() == city.strip().lower()]

    businesses.sort(key=lambda b: (-b.safety_score, b.name.lower()))
    return businesses
