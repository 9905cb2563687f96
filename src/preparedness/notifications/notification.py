"""Notification aggregate (CQRS) — one inbox entry for one member.

Notifications are written by the dispatcher as a side effect of request
transitions. `source_key` names the transition that produced the entry, so
handling the same event twice never yields a second notification for the
same recipient.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from preparedness.domain import preparedness
from preparedness.errors import NotRecipient
from preparedness.notifications.events import NotificationCreated, NotificationRead


class NotificationType(Enum):
    MESSAGE = "message"
    RESOURCE_REQUEST = "resource_request"
    EMERGENCY = "emergency"
    SYSTEM = "system"


@preparedness.aggregate
class Notification:
    recipient_id: Identifier(required=True)
    notification_type: String(choices=NotificationType, required=True)

    # Content
    title: String(required=True, max_length=255)
    content: Text(required=True)
    sender_name: String(max_length=100)
    action_url: String(max_length=500)

    # Source transition, e.g. "RequestApproved:<request id>"
    source_key: String(max_length=255)

    is_read: Boolean(default=False)
    read_at: DateTime()
    created_at: DateTime()

    @classmethod
    def create(
        cls,
        recipient_id,
        notification_type,
        title,
        content,
        sender_name=None,
        action_url=None,
        source_key=None,
    ):
        now = datetime.now(UTC)
        notification = cls(
            recipient_id=recipient_id,
            notification_type=notification_type,
            title=title,
            content=content,
            sender_name=sender_name,
            action_url=action_url,
            source_key=source_key,
            is_read=False,
            created_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                recipient_id=str(recipient_id),
                notification_type=notification_type,
                title=title,
                content=content,
                sender_name=sender_name,
                action_url=action_url,
                source_key=source_key,
                created_at=now,
            )
        )
        return notification

    def assert_recipient(self, actor_id) -> None:
        if str(self.recipient_id) != str(actor_id):
            raise NotRecipient()

    def mark_read(self) -> bool:
        """Mark as read. Returns False when it already was."""
        if self.is_read:
            return False

        now = datetime.now(UTC)
        self.is_read = True
        self.read_at = now
        self.raise_(
            NotificationRead(
                notification_id=str(self.id),
                recipient_id=str(self.recipient_id),
                read_at=now,
            )
        )
        return True
