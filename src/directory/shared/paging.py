"""Reading a whole repository through the DAO's bounded pages."""

PAGE_SIZE = 100


def iter_all(query, page_size=PAGE_SIZE):
    """Yield every record matching ``query``, oldest first.

    A QuerySet returns at most one page of results, so this walks offsets
    until a short page comes back. Pages are ordered by ``created_at`` so
    offsets stay stable on SQL providers.
    """
    query = query.order_by("created_at")
    offset = 0
    while True:
        page = query.offset(offset).limit(page_size).all().items
        yield from page
        if len(page) < page_size:
            return
        offset += page_size
