"""Sent to the offer owner when a member asks for a share."""

from preparedness.notifications.links import Audience
from preparedness.notifications.notification import NotificationType


class RequestSubmittedTemplate:
    notification_type = NotificationType.RESOURCE_REQUEST.value
    audience = Audience.OWNER

    @staticmethod
    def render(context: dict) -> dict:
        requester = context.get("actor_name", "A community member")
        resource_name = context.get("resource_name", "your resource")
        content = f"{requester} would like {context.get('quantity', '')} {context.get('unit', '')} of your {resource_name}"
        if context.get("message"):
            content += f': "{context["message"]}"'
        return {
            "title": f"Resource request from {requester}",
            "content": " ".join(content.split()),
        }
