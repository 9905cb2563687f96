"""Sent to the owner once the exchange is marked completed."""

from preparedness.notifications.links import Audience
from preparedness.notifications.notification import NotificationType


class RequestCompletedTemplate:
    notification_type = NotificationType.RESOURCE_REQUEST.value
    audience = Audience.OWNER

    @staticmethod
    def render(context: dict) -> dict:
        actor = context.get("actor_name", "A community member")
        resource_name = context.get("resource_name", "your resource")
        quantity = f"{context.get('quantity', '')} {context.get('unit', '')}".strip()
        return {
            "title": f"Exchange completed: {resource_name}",
            "content": f"{actor} marked the hand-off of {quantity} {resource_name} as completed. Your stockpile was updated.",
        }
