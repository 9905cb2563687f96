"""Domain tests for the SharedOffer aggregate and its request state machine."""

import pytest
from preparedness.errors import (
    AuthorizationError,
    NotCommunityMember,
    NotOwner,
    NotRequester,
    OfferHasActiveRequest,
    OfferNotAvailable,
    OfferNotEditable,
    QuantityExceedsOffer,
    RequestNotApproved,
    RequestNotPending,
    SelfRequest,
    StaleOffer,
)
from preparedness.inventory.resource import Resource
from preparedness.sharing.events import (
    OfferPublished,
    RequestApproved,
    RequestCancelled,
    RequestCompleted,
    RequestDenied,
    RequestSubmitted,
)
from preparedness.sharing.offer import AUTO_DENY_MESSAGE, OfferStatus, RequestStatus, SharedOffer
from protean.exceptions import ObjectNotFoundError, ValidationError


def _offer(quantity=5):
    resource = Resource.add(
        owner_id="anna",
        name="Bottled water",
        category="water",
        quantity=10,
        unit="liters",
    )
    return SharedOffer.publish(resource=resource, community_id="storgatan", quantity=quantity)


def _events_of(offer, event_cls):
    return [e for e in offer._events if isinstance(e, event_cls)]


class TestPublish:
    def test_publish_snapshots_resource(self):
        offer = _offer()
        assert offer.status == OfferStatus.AVAILABLE.value
        assert offer.owner_id == "anna"
        assert offer.resource_name == "Bottled water"
        assert offer.resource_unit == "liters"
        assert offer.offered_quantity == 5
        assert offer.revision == 1

    def test_publish_raises_event(self):
        assert len(_events_of(_offer(), OfferPublished)) == 1

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_publish_requires_positive_quantity(self, quantity):
        with pytest.raises(ValidationError):
            _offer(quantity=quantity)


class TestSubmitRequest:
    def test_submit_creates_pending_request(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2, message="For the kids")
        assert request.status == RequestStatus.PENDING.value
        assert request.requested_at is not None
        assert len(_events_of(offer, RequestSubmitted)) == 1

    def test_several_pending_requests_are_allowed(self):
        offer = _offer()
        offer.submit_request("bertil", 2)
        offer.submit_request("cecilia", 3)
        assert len(offer.requests_in(RequestStatus.PENDING)) == 2

    def test_owner_cannot_request_own_offer(self):
        with pytest.raises(SelfRequest):
            _offer().submit_request("anna", 1)

    def test_non_member_is_rejected(self):
        with pytest.raises(NotCommunityMember):
            _offer().submit_request("stranger", 1, requester_is_member=False)

    def test_quantity_must_fit_offer(self):
        with pytest.raises(QuantityExceedsOffer):
            _offer(quantity=5).submit_request("bertil", 6)

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            _offer().submit_request("bertil", 0)

    def test_unavailable_offer_is_checked_first(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.approve(request.id, "anna")
        # Even a self-request reports the offer state first
        with pytest.raises(OfferNotAvailable):
            offer.submit_request("anna", 1)

    def test_submit_bumps_revision(self):
        offer = _offer()
        offer.submit_request("bertil", 2)
        assert offer.revision == 2


class TestApprove:
    def test_approve_reserves_offer(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.approve(request.id, "anna", response_message="Pick up at 6")
        assert request.status == RequestStatus.APPROVED.value
        assert request.approved_at is not None
        assert request.response_message == "Pick up at 6"
        assert offer.status == OfferStatus.REQUESTED.value

    def test_approve_denies_pending_siblings(self):
        offer = _offer()
        first = offer.submit_request("bertil", 2)
        second = offer.submit_request("cecilia", 3)
        offer.approve(first.id, "anna")

        assert second.status == RequestStatus.DENIED.value
        assert second.auto_denied is True
        assert second.response_message == AUTO_DENY_MESSAGE

        denied = _events_of(offer, RequestDenied)
        assert len(denied) == 1
        assert denied[0].auto_denied is True
        assert denied[0].requester_id == "cecilia"

    def test_approve_leaves_settled_siblings_alone(self):
        offer = _offer()
        first = offer.submit_request("bertil", 2)
        second = offer.submit_request("cecilia", 3)
        offer.cancel(second.id, "cecilia")
        offer.approve(first.id, "anna")
        assert second.status == RequestStatus.CANCELLED.value
        assert second.auto_denied is False

    def test_only_owner_approves(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        with pytest.raises(NotOwner):
            offer.approve(request.id, "cecilia")

    def test_second_approval_reports_offer_unavailable(self):
        offer = _offer()
        first = offer.submit_request("bertil", 2)
        second = offer.submit_request("cecilia", 3)
        offer.approve(first.id, "anna")
        with pytest.raises(OfferNotAvailable):
            offer.approve(second.id, "anna")

    def test_denied_request_cannot_be_approved(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.deny(request.id, "anna")
        with pytest.raises(RequestNotPending):
            offer.approve(request.id, "anna")

    def test_approve_rechecks_quantity_after_revision(self):
        offer = _offer(quantity=5)
        request = offer.submit_request("bertil", 4)
        offer.revise(quantity=3)
        with pytest.raises(QuantityExceedsOffer):
            offer.approve(request.id, "anna")

    def test_unknown_request_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            _offer().approve("missing", "anna")

    def test_approve_raises_event(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.approve(request.id, "anna")
        approved = _events_of(offer, RequestApproved)
        assert len(approved) == 1
        assert approved[0].request_id == str(request.id)


class TestDeny:
    def test_deny_keeps_offer_available(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.deny(request.id, "anna", response_message="Sorry")
        assert request.status == RequestStatus.DENIED.value
        assert request.auto_denied is False
        assert offer.status == OfferStatus.AVAILABLE.value

    def test_deny_twice_is_a_conflict(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.deny(request.id, "anna")
        with pytest.raises(RequestNotPending):
            offer.deny(request.id, "anna")

    def test_only_owner_denies(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        with pytest.raises(NotOwner):
            offer.deny(request.id, "bertil")


class TestComplete:
    def _approved(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.approve(request.id, "anna")
        return offer, request

    def test_requester_completes(self):
        offer, request = self._approved()
        offer.complete(request.id, "bertil")
        assert request.status == RequestStatus.COMPLETED.value
        assert request.completed_at is not None
        assert offer.status == OfferStatus.TAKEN.value

    def test_owner_completes(self):
        offer, request = self._approved()
        offer.complete(request.id, "anna")
        event = _events_of(offer, RequestCompleted)[0]
        assert event.completed_by == "anna"

    def test_third_party_cannot_complete(self):
        offer, request = self._approved()
        with pytest.raises(AuthorizationError):
            offer.complete(request.id, "cecilia")

    def test_pending_request_cannot_complete(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        with pytest.raises(RequestNotApproved):
            offer.complete(request.id, "bertil")

    def test_complete_twice_is_a_conflict(self):
        offer, request = self._approved()
        offer.complete(request.id, "bertil")
        with pytest.raises(RequestNotApproved):
            offer.complete(request.id, "bertil")


class TestCancel:
    def test_cancel_pending_keeps_offer(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.cancel(request.id, "bertil")
        assert request.status == RequestStatus.CANCELLED.value
        assert offer.status == OfferStatus.AVAILABLE.value

    def test_cancel_approved_frees_offer(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.approve(request.id, "anna")
        offer.cancel(request.id, "bertil")
        assert offer.status == OfferStatus.AVAILABLE.value
        assert _events_of(offer, RequestCancelled)[0].was_approved is True

    def test_only_requester_cancels(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        with pytest.raises(NotRequester):
            offer.cancel(request.id, "anna")

    def test_cancel_after_complete_reports_not_approved(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.approve(request.id, "anna")
        offer.complete(request.id, "anna")
        with pytest.raises(RequestNotApproved):
            offer.cancel(request.id, "bertil")

    def test_cancel_after_deny_reports_not_pending(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.deny(request.id, "anna")
        with pytest.raises(RequestNotPending):
            offer.cancel(request.id, "bertil")


class TestOwnerEdits:
    def test_revise_changes_quantity_and_revision(self):
        offer = _offer()
        offer.revise(quantity=3, location="Front door")
        assert offer.offered_quantity == 3
        assert offer.location == "Front door"
        assert offer.revision == 2

    def test_revise_requires_available_offer(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.approve(request.id, "anna")
        with pytest.raises(OfferNotEditable):
            offer.revise(quantity=4)

    def test_withdraw_blocked_by_pending_request(self):
        offer = _offer()
        offer.submit_request("bertil", 2)
        with pytest.raises(OfferHasActiveRequest):
            offer.assert_withdrawable()

    def test_withdraw_blocked_when_taken(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.approve(request.id, "anna")
        offer.complete(request.id, "anna")
        with pytest.raises(OfferNotEditable):
            offer.assert_withdrawable()

    def test_withdraw_allowed_after_denials(self):
        offer = _offer()
        request = offer.submit_request("bertil", 2)
        offer.deny(request.id, "anna")
        offer.assert_withdrawable()


class TestRevisionCheck:
    def test_matching_revision_passes(self):
        offer = _offer()
        offer.check_revision(1)

    def test_missing_revision_skips_check(self):
        _offer().check_revision(None)

    def test_stale_revision_is_a_conflict(self):
        offer = _offer()
        offer.submit_request("bertil", 1)
        with pytest.raises(StaleOffer):
            offer.check_revision(1)


class TestApprovedIsExclusive:
    def test_at_most_one_approved_request(self):
        offer = _offer()
        requests = [offer.submit_request(member, 1) for member in ("bertil", "cecilia", "david")]
        offer.approve(requests[1].id, "anna")
        approved = offer.requests_in(RequestStatus.APPROVED)
        assert [str(r.id) for r in approved] == [str(requests[1].id)]
        assert offer.requests_in(RequestStatus.PENDING) == []
