"""Sent to the requester when the owner approves their request."""

from preparedness.notifications.links import Audience
from preparedness.notifications.notification import NotificationType


class RequestApprovedTemplate:
    notification_type = NotificationType.RESOURCE_REQUEST.value
    audience = Audience.REQUESTER

    @staticmethod
    def render(context: dict) -> dict:
        owner = context.get("actor_name", "The owner")
        resource_name = context.get("resource_name", "the resource")
        content = f"{owner} approved your request for {resource_name}. Arrange the hand-off and mark it completed."
        if context.get("response_message"):
            content += f' Message: "{context["response_message"]}"'
        return {
            "title": f"Request approved: {resource_name}",
            "content": content,
        }
