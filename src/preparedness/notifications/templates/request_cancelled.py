"""Sent to the owner when a requester withdraws their request."""

from preparedness.notifications.links import Audience
from preparedness.notifications.notification import NotificationType


class RequestCancelledTemplate:
    notification_type = NotificationType.RESOURCE_REQUEST.value
    audience = Audience.OWNER

    @staticmethod
    def render(context: dict) -> dict:
        requester = context.get("actor_name", "A community member")
        resource_name = context.get("resource_name", "your resource")
        content = f"{requester} cancelled their request for {resource_name}."
        if context.get("was_approved"):
            content += " The offer is available again."
        return {
            "title": f"Request cancelled: {resource_name}",
            "content": content,
        }
