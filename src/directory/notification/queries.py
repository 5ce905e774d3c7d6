"""Read-side lookups over a member's notifications."""

from protean.utils.globals import current_domain

from directory.notification.notification import Notification, NotificationKind
from directory.shared.paging import iter_all

_KIND_FILTERS = {kind.value.lower(): kind.value for kind in NotificationKind}


def find_notifications(user_id, filter_by="all"):
    """Return a member's notifications, newest first.

    ``filter_by`` is ``all``, ``unread``, or a notification kind
    (``safety``, ``community``).
    """
    query = current_domain.repository_for(Notification)._dao.query.filter(user_id=str(user_id))
    notifications = list(iter_all(query))

    if filter_by == "unread":
        notifications = [n for n in notifications if not n.read]
    elif filter_by in _KIND_FILTERS:
        notifications = [n for n in notifications if n.kind == _KIND_FILTERS[filter_by]]

    notifications.sort(key=lambda n: n.created_at, reverse=True)
    return notifications


def unread_count(user_id):
    return len(find_notifications(user_id, filter_by="unread"))
