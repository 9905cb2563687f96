"""Sent to the requester when the owner marks the exchange completed."""

from preparedness.notifications.links import Audience
from preparedness.notifications.notification import NotificationType


class RequestHandedOverTemplate:
    notification_type = NotificationType.RESOURCE_REQUEST.value
    audience = Audience.REQUESTER

    @staticmethod
    def render(context: dict) -> dict:
        owner = context.get("actor_name", "The owner")
        resource_name = context.get("resource_name", "the resource")
        quantity = f"{context.get('quantity', '')} {context.get('unit', '')}".strip()
        return {
            "title": f"Hand-off completed: {resource_name}",
            "content": f"{owner} marked the hand-off of {quantity} {resource_name} to you as completed.",
        }
