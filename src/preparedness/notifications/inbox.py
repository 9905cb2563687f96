"""Notification inbox — recipient-side commands, handler and queries."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from preparedness.domain import preparedness
from preparedness.notifications.notification import Notification


@preparedness.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@preparedness.command(part_of="Notification")
class MarkAllNotificationsRead:
    recipient_id = Identifier(required=True)


@preparedness.command(part_of="Notification")
class DeleteNotification:
    notification_id = Identifier(required=True)
    actor_id = Identifier(required=True)


def _notifications_of(recipient_id, unread_only=False):
    filters = {"recipient_id": str(recipient_id)}
    if unread_only:
        filters["is_read"] = False
    return current_domain.repository_for(Notification)._dao.query.filter(**filters).all().items


@preparedness.command_handler(part_of=Notification)
class InboxHandler:
    @handle(MarkNotificationRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.assert_recipient(command.actor_id)
        if notification.mark_read():
            repo.add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_read(self, command):
        repo = current_domain.repository_for(Notification)
        unread = _notifications_of(command.recipient_id, unread_only=True)
        for notification in unread:
            notification.mark_read()
            repo.add(notification)
        return len(unread)

    @handle(DeleteNotification)
    def delete(self, command):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.assert_recipient(command.actor_id)
        repo._dao.delete(notification)


class Inbox:
    def list(self, recipient_id, unread_only=False) -> list[Notification]:
        """Newest first."""
        items = _notifications_of(recipient_id, unread_only=unread_only)
        return sorted(items, key=lambda n: n.created_at, reverse=True)

    def unread_count(self, recipient_id) -> int:
        return len(_notifications_of(recipient_id, unread_only=True))

    def mark_read(self, notification_id, actor_id) -> None:
        current_domain.process(
            MarkNotificationRead(notification_id=notification_id, actor_id=actor_id),
            asynchronous=False,
        )

    def mark_all_read(self, recipient_id) -> int:
        return current_domain.process(MarkAllNotificationsRead(recipient_id=recipient_id), asynchronous=False)

    def delete(self, notification_id, actor_id) -> None:
        current_domain.process(
            DeleteNotification(notification_id=notification_id, actor_id=actor_id),
            asynchronous=False,
        )
