"""Sent to a pending requester whose request lost to an approved one."""

from preparedness.notifications.links import Audience
from preparedness.notifications.notification import NotificationType


class RequestDisplacedTemplate:
    notification_type = NotificationType.RESOURCE_REQUEST.value
    audience = Audience.REQUESTER

    @staticmethod
    def render(context: dict) -> dict:
        resource_name = context.get("resource_name", "the resource")
        return {
            "title": f"{resource_name} went to another member",
            "content": (
                f"Another request for {resource_name} was approved, so yours was closed. "
                "Keep an eye on the community for new offers."
            ),
        }
