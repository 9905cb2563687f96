"""Domain events for the Notification aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from preparedness.domain import preparedness


@preparedness.event(part_of="Notification")
class NotificationCreated:
    """A notification landed in a member's inbox."""

    __version__ = "v1"

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    notification_type = String(required=True)
    title = String(required=True)
    content = Text(required=True)
    sender_name = String()
    action_url = String()
    source_key = String()
    created_at = DateTime(required=True)


@preparedness.event(part_of="Notification")
class NotificationRead:
    __version__ = "v1"

    notification_id = Identifier(required=True)
    recipient_id = Identifier(required=True)
    read_at = DateTime(required=True)
