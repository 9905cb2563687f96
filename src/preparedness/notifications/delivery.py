"""Relays new notifications to the push channel.

The inbox entry is the source of truth; the push is a courtesy. Relay
failures are logged and never undo the stored notification.
"""

import structlog
from protean.utils.mixins import handle

from preparedness.domain import preparedness
from preparedness.notifications.channel import PUSH, get_channel
from preparedness.notifications.events import NotificationCreated
from preparedness.notifications.notification import Notification

logger = structlog.get_logger(__name__)


def topic_for(recipient_id) -> str:
    return f"notifications:{recipient_id}"


@preparedness.event_handler(part_of=Notification)
class PushRelay:
    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        try:
            adapter = get_channel(PUSH)
            result = adapter.send(
                topic=topic_for(event.recipient_id),
                title=event.title,
                body=event.content,
                data={
                    "notification_id": str(event.notification_id),
                    "notification_type": event.notification_type,
                    "action_url": event.action_url,
                    "sender_name": event.sender_name,
                },
            )
        except Exception as exc:
            logger.error(
                "Push relay failed",
                notification_id=str(event.notification_id),
                error=str(exc),
            )
            return

        if result.get("status") != "sent":
            logger.warning(
                "Push relay rejected notification",
                notification_id=str(event.notification_id),
                error=result.get("error"),
            )
