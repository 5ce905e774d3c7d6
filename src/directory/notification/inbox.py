"""Reading notifications: mark one read or unread, or mark all read."""

from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from directory.domain import directory
from directory.notification.notification import Notification
from directory.notification.queries import find_notifications


@directory.command(part_of="Notification")
class MarkNotification:
    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)
    read = Boolean(default=True)


@directory.command(part_of="Notification")
class MarkAllNotificationsRead:
    user_id = Identifier(required=True)


@directory.command_handler(part_of=Notification)
class InboxHandler:
    @handle(MarkNotification)
    def mark_notification(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)

        if str(notification.user_id) != str(command.user_id):
            raise ValidationError({"notification": ["Notification belongs to another member"]})

        notification.mark(read=command.read)
        repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command):
        repo = current_domain.repository_for(Notification)
        unread = find_notifications(command.user_id, filter_by="unread")
        for notification in unread:
            notification.mark(read=True)
            repo.add(notification)
        return len(unread)
