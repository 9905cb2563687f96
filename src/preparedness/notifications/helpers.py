"""Shared helpers for the notification dispatcher.

Provides the common pattern: skip if this transition already notified the
recipient → render template → create Notification.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from preparedness.community.community import Community
from preparedness.notifications.notification import Notification
from preparedness.notifications.templates import get_template
from preparedness.settings import custom_setting

logger = structlog.get_logger(__name__)


def already_notified(recipient_id: str, source_key: str) -> bool:
    existing = (
        current_domain.repository_for(Notification)
        ._dao.query.filter(recipient_id=str(recipient_id), source_key=source_key)
        .all()
        .items
    )
    return bool(existing)


def sender_name_for(community_id: str, member_id: str) -> str:
    """Display name of `member_id` in the community, or the configured fallback."""
    try:
        community = current_domain.repository_for(Community).get(community_id)
        name = community.display_name_of(member_id)
    except ObjectNotFoundError as exc:
        logger.warning(
            "Could not resolve sender name",
            community_id=str(community_id),
            member_id=str(member_id),
            error=str(exc),
        )
        name = None
    return name or custom_setting("default_sender_name")


def create_notification(
    recipient_id: str,
    template_key: str,
    context: dict,
    source_key: str,
    sender_name: str | None = None,
    action_url: str | None = None,
):
    """Render `template_key` and store one Notification for the recipient.

    Returns:
        Notification ID, or None when the transition was already notified.
    """
    if already_notified(recipient_id, source_key):
        logger.info(
            "Notification already exists for transition, skipping",
            recipient_id=str(recipient_id),
            source_key=source_key,
        )
        return None

    template_cls = get_template(template_key)
    rendered = template_cls.render(context)

    notification = Notification.create(
        recipient_id=recipient_id,
        notification_type=template_cls.notification_type,
        title=rendered["title"],
        content=rendered["content"],
        sender_name=sender_name,
        action_url=action_url,
        source_key=source_key,
    )
    current_domain.repository_for(Notification).add(notification)

    logger.info(
        "Notification created",
        notification_id=str(notification.id),
        recipient_id=str(recipient_id),
        template=template_cls.__name__,
        source_key=source_key,
    )
    return str(notification.id)
