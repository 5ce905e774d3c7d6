"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String

from directory.domain import directory


@directory.event(part_of="Notification")
class NotificationSent:
    __version__ = 1

    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    kind = String(required=True)
    business_id = Identifier()
    sent_at = DateTime(required=True)
