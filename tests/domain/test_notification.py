"""Domain tests for the Notification aggregate."""

import pytest
from preparedness.errors import NotRecipient
from preparedness.notifications.events import NotificationCreated, NotificationRead
from preparedness.notifications.notification import Notification, NotificationType
from protean.exceptions import ValidationError


def _notification(**overrides):
    defaults = {
        "recipient_id": "anna",
        "notification_type": NotificationType.RESOURCE_REQUEST.value,
        "title": "Resource request from Bertil",
        "content": "Bertil would like 2 liters of your Bottled water",
        "sender_name": "Bertil",
        "source_key": "RequestSubmitted:req-1",
    }
    defaults.update(overrides)
    return Notification.create(**defaults)


class TestCreateNotification:
    def test_create_starts_unread(self):
        notification = _notification()
        assert notification.is_read is False
        assert notification.read_at is None
        assert notification.created_at is not None

    def test_create_raises_event(self):
        event = _notification()._events[0]
        assert isinstance(event, NotificationCreated)
        assert event.source_key == "RequestSubmitted:req-1"

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValidationError):
            _notification(notification_type="gossip")


class TestMarkRead:
    def test_mark_read_sets_timestamp(self):
        notification = _notification()
        assert notification.mark_read() is True
        assert notification.is_read is True
        assert notification.read_at is not None
        assert isinstance(notification._events[-1], NotificationRead)

    def test_mark_read_twice_is_a_noop(self):
        notification = _notification()
        notification.mark_read()
        first_read_at = notification.read_at
        assert notification.mark_read() is False
        assert notification.read_at == first_read_at


class TestRecipient:
    def test_recipient_passes(self):
        _notification().assert_recipient("anna")

    def test_other_member_is_rejected(self):
        with pytest.raises(NotRecipient):
            _notification().assert_recipient("bertil")
