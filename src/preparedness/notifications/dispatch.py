"""NotificationDispatcher — turns request transitions into inbox entries.

Reacts to SharedOffer request events and writes one Notification per
affected member per transition:

    RequestSubmitted   → offer owner
    RequestApproved    → requester
    RequestDenied      → requester (owner decision or displaced by approval)
    RequestCompleted   → offer owner, and the requester when the owner completed it
    RequestCancelled   → offer owner

Delivery is best-effort. A failure here is logged and dropped; the transition
that raised the event is already committed and stays that way.
"""

import structlog
from protean.utils.mixins import handle

from preparedness.domain import preparedness
from preparedness.notifications.helpers import create_notification, sender_name_for
from preparedness.notifications.links import action_url
from preparedness.notifications.templates import get_template
from preparedness.sharing.events import (
    RequestApproved,
    RequestCancelled,
    RequestCompleted,
    RequestDenied,
    RequestSubmitted,
)
from preparedness.sharing.offer import SharedOffer

logger = structlog.get_logger(__name__)


def _format_quantity(quantity) -> str:
    return f"{quantity:g}" if quantity is not None else ""


def _notify(event, template_key: str, recipient_id, actor_id, **extra) -> None:
    source_key = f"{type(event).__name__}:{event.request_id}"
    try:
        template_cls = get_template(template_key)
        context = {
            "actor_name": sender_name_for(event.community_id, actor_id),
            "resource_name": event.resource_name,
            "quantity": _format_quantity(event.requested_quantity),
            "unit": event.resource_unit,
            **extra,
        }
        create_notification(
            recipient_id=str(recipient_id),
            template_key=template_key,
            context=context,
            source_key=source_key,
            sender_name=context["actor_name"],
            action_url=action_url(
                template_cls.audience,
                str(event.community_id),
                str(event.offer_id),
                str(event.request_id),
            ),
        )
    except Exception as exc:
        logger.error(
            "Notification dispatch failed",
            source_key=source_key,
            recipient_id=str(recipient_id),
            error=str(exc),
        )


@preparedness.event_handler(part_of=SharedOffer)
class NotificationDispatcher:
    @handle(RequestSubmitted)
    def on_request_submitted(self, event: RequestSubmitted) -> None:
        _notify(
            event,
            "request_submitted",
            recipient_id=event.owner_id,
            actor_id=event.requester_id,
            message=event.message,
        )

    @handle(RequestApproved)
    def on_request_approved(self, event: RequestApproved) -> None:
        _notify(
            event,
            "request_approved",
            recipient_id=event.requester_id,
            actor_id=event.owner_id,
            response_message=event.response_message,
        )

    @handle(RequestDenied)
    def on_request_denied(self, event: RequestDenied) -> None:
        _notify(
            event,
            "request_displaced" if event.auto_denied else "request_denied",
            recipient_id=event.requester_id,
            actor_id=event.owner_id,
            response_message=event.response_message,
        )

    @handle(RequestCompleted)
    def on_request_completed(self, event: RequestCompleted) -> None:
        _notify(
            event,
            "request_completed",
            recipient_id=event.owner_id,
            actor_id=event.completed_by,
        )
        if str(event.completed_by) == str(event.owner_id):
            _notify(
                event,
                "request_handed_over",
                recipient_id=event.requester_id,
                actor_id=event.owner_id,
            )

    @handle(RequestCancelled)
    def on_request_cancelled(self, event: RequestCancelled) -> None:
        _notify(
            event,
            "request_cancelled",
            recipient_id=event.owner_id,
            actor_id=event.requester_id,
            was_approved=event.was_approved,
        )
