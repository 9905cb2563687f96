"""Application tests for relaying inbox entries to the push channel."""

import pytest
from preparedness.notifications.channel import PUSH, get_channel, set_channel
from preparedness.notifications.channel.push_port import PushPort
from preparedness.notifications.inbox import Inbox
from preparedness.sharing.coordinator import RequestCoordinator


class ExplodingPush(PushPort):
    def send(self, topic, title, body, data=None):
        raise ConnectionError("relay down")


@pytest.fixture
def push():
    return get_channel(PUSH)


class TestPushRelay:
    def test_new_notification_is_pushed_to_recipient_topic(self, push, offer_id):
        request_id = RequestCoordinator().create(offer_id, "bertil", 2)

        assert len(push.sent_pushes) == 1
        sent = push.sent_pushes[0]
        assert sent["topic"] == "notifications:anna"
        assert sent["title"] == "Resource request from Bertil"
        assert sent["data"]["notification_type"] == "resource_request"
        assert f"request={request_id}" in sent["data"]["action_url"]

    def test_rejected_push_keeps_inbox_entry(self, push, offer_id):
        push.configure(should_succeed=False)

        RequestCoordinator().create(offer_id, "bertil", 2)

        assert push.sent_pushes == []
        assert Inbox().unread_count("anna") == 1

    def test_relay_exception_keeps_inbox_entry(self, offer_id):
        set_channel(PUSH, ExplodingPush())

        RequestCoordinator().create(offer_id, "bertil", 2)

        assert Inbox().unread_count("anna") == 1

    def test_unknown_channel_is_rejected(self):
        with pytest.raises(ValueError):
            get_channel("carrier-pigeon")
