"""Notification aggregate: one entry in a member's notification panel."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from directory.domain import directory
from directory.notification.events import NotificationSent


class NotificationKind(Enum):
    SAFETY = "Safety"
    COMMUNITY = "Community"


class NotificationPriority(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@directory.aggregate
class Notification:
    user_id = Identifier(required=True)
    kind = String(required=True, choices=NotificationKind)
    title = String(required=True, max_length=200)
    message = Text(required=True)
    business_id = Identifier()
    priority = String(choices=NotificationPriority, default=NotificationPriority.MEDIUM.value)
    read = Boolean(default=False)
    read_at = DateTime()
    created_at = DateTime()

    @classmethod
    def send(cls, user_id, kind, title, message, business_id=None, priority=NotificationPriority.MEDIUM.value):
        now = datetime.now(UTC)
        notification = cls(
            user_id=user_id,
            kind=kind,
            title=title,
            message=message,
            business_id=business_id,
            priority=priority,
            read=False,
            created_at=now,
        )
        notification.raise_(
            NotificationSent(
                notification_id=str(notification.id),
                user_id=str(user_id),
                kind=kind,
                business_id=str(business_id) if business_id else None,
                sent_at=now,
            )
        )
        return notification

    def mark(self, read=True):
        """Mark as read, or back to unread."""
        self.read = read
        self.read_at = datetime.now(UTC) if read else None

    def to_dict_view(self):
        return {
            "notification_id": str(self.id),
            "user_id": str(self.user_id),
            "type": self.kind,
            "title": self.title,
            "message": self.message,
            "business_id": str(self.business_id) if self.business_id else None,
            "priority": self.priority,
            "read": self.read,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
