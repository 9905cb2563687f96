"""Sent to the requester when the owner turns their request down."""

from preparedness.notifications.links import Audience
from preparedness.notifications.notification import NotificationType


class RequestDeniedTemplate:
    notification_type = NotificationType.RESOURCE_REQUEST.value
    audience = Audience.REQUESTER

    @staticmethod
    def render(context: dict) -> dict:
        owner = context.get("actor_name", "The owner")
        resource_name = context.get("resource_name", "the resource")
        content = f"{owner} declined your request for {resource_name}."
        if context.get("response_message"):
            content += f' Message: "{context["response_message"]}"'
        return {
            "title": f"Request declined: {resource_name}",
            "content": content,
        }
