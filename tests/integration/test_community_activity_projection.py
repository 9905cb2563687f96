"""Integration tests for the community activity feed."""

from preparedness.projections.community_activity import ActivityType, recent_activity
from preparedness.sharing.coordinator import RequestCoordinator


def _types(community_id):
    return [a.activity_type for a in recent_activity(community_id)]


class TestCommunityActivity:
    def test_joins_are_recorded(self, neighbourhood):
        joined = [a for a in recent_activity(neighbourhood.community_id) if a.activity_type == "member_joined"]
        assert {a.user_id for a in joined} == {"anna", "bertil", "cecilia"}
        assert any(a.title == "Bertil joined the community" for a in joined)

    def test_published_offer_is_recorded(self, neighbourhood, offer_id):
        latest = recent_activity(neighbourhood.community_id)[0]
        assert latest.activity_type == ActivityType.RESOURCE_SHARED.value
        assert latest.title == "Bottled water is now shared"
        assert latest.description == "5 liters offered to the community"
        assert latest.user_id == "anna"

    def test_completed_exchange_is_recorded(self, neighbourhood, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        coordinator.approve(offer_id, request_id, "anna")
        coordinator.complete(offer_id, request_id, "bertil")

        latest = recent_activity(neighbourhood.community_id)[0]
        assert latest.activity_type == ActivityType.EXCHANGE_COMPLETED.value
        assert latest.user_id == "bertil"
        assert latest.description == "2 liters shared between members"

    def test_other_transitions_are_not_recorded(self, neighbourhood, offer_id):
        before = len(recent_activity(neighbourhood.community_id))
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        coordinator.deny(offer_id, request_id, "anna")
        assert len(recent_activity(neighbourhood.community_id)) == before

    def test_limit(self, neighbourhood, offer_id):
        assert len(recent_activity(neighbourhood.community_id, limit=2)) == 2

    def test_other_communities_are_separate(self, neighbourhood):
        assert recent_activity("elsewhere") == []
