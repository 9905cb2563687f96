"""Integration tests for racing changes on one offer or one stockpile line.

Whatever the interleaving, exactly one of two competing transitions wins and
the other sees a ConflictError; the stockpile is decremented at most once and
never promised beyond what it holds.
"""

import threading

import pytest
from preparedness.domain import preparedness
from preparedness.errors import (
    ConcurrentUpdate,
    ConflictError,
    InsufficientQuantity,
    OfferNotAvailable,
    RequestNotApproved,
    StaleOffer,
)
from preparedness.inventory.resource import Resource
from preparedness.inventory.store import InventoryStore
from preparedness.sharing.coordinator import RequestCoordinator
from preparedness.sharing.guard import offer_guard, resource_key
from preparedness.sharing.offer import RequestStatus
from preparedness.sharing.publishing import committed_quantity
from preparedness.sharing.registry import SharingRegistry


def _race(*calls):
    """Run each call on its own thread, released together. Returns outcomes in call order."""
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def runner(index, call):
        with preparedness.domain_context():
            barrier.wait()
            try:
                outcomes[index] = call()
            except Exception as exc:
                outcomes[index] = exc

    threads = [threading.Thread(target=runner, args=(i, c)) for i, c in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return outcomes


def _in_other_context(call):
    """Run `call` to completion on another thread with its own domain context."""
    failures = []

    def runner():
        with preparedness.domain_context():
            try:
                call()
            except Exception as exc:
                failures.append(exc)

    thread = threading.Thread(target=runner)
    thread.start()
    thread.join(timeout=10)
    assert failures == []


def _split(outcomes):
    winners = [o for o in outcomes if not isinstance(o, Exception)]
    losers = [o for o in outcomes if isinstance(o, Exception)]
    return winners, losers


class TestGuard:
    def test_busy_offer_rejects_approval(self, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)

        with offer_guard.claim(offer_id, OfferNotAvailable):
            with pytest.raises(OfferNotAvailable):
                coordinator.approve(offer_id, request_id, "anna")

        # Released: the same call now goes through
        coordinator.approve(offer_id, request_id, "anna")

    @pytest.mark.parametrize("operation", ["deny", "cancel"])
    def test_busy_offer_reports_retryable_conflict(self, offer_id, operation):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        actor = "bertil" if operation == "cancel" else "anna"

        with offer_guard.claim(offer_id):
            with pytest.raises(ConcurrentUpdate):
                getattr(coordinator, operation)(offer_id, request_id, actor)

        # The request was never touched and the retry goes through
        assert SharingRegistry().get(offer_id).request_by_id(request_id).status == RequestStatus.PENDING.value
        getattr(coordinator, operation)(offer_id, request_id, actor)

    def test_busy_offer_rejects_completion_without_touching_it(self, neighbourhood, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        coordinator.approve(offer_id, request_id, "anna")

        with offer_guard.claim(offer_id):
            with pytest.raises(ConcurrentUpdate):
                coordinator.complete(offer_id, request_id, "anna")

        assert SharingRegistry().get(offer_id).request_by_id(request_id).status == RequestStatus.APPROVED.value
        assert InventoryStore().get(neighbourhood.resource_id).quantity == 10

    def test_busy_offer_rejects_owner_edits(self, offer_id):
        with offer_guard.claim(offer_id):
            with pytest.raises(ConcurrentUpdate):
                SharingRegistry().revise(offer_id, "anna", quantity=3)

    def test_busy_resource_rejects_publishing(self, neighbourhood):
        with offer_guard.claim(resource_key(neighbourhood.resource_id)):
            with pytest.raises(ConcurrentUpdate):
                SharingRegistry().publish(
                    actor_id="anna",
                    resource_id=neighbourhood.resource_id,
                    community_id=neighbourhood.community_id,
                    quantity=2,
                )

    def test_guard_is_released_after_failure(self, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        with pytest.raises(RequestNotApproved):
            coordinator.complete(offer_id, request_id, "anna")
        assert str(offer_id) not in offer_guard.in_flight()

    def test_other_offers_are_not_blocked(self, neighbourhood, offer_id):
        other = SharingRegistry().publish(
            actor_id="anna",
            resource_id=neighbourhood.resource_id,
            community_id=neighbourhood.community_id,
            quantity=2,
        )
        with offer_guard.claim(offer_id):
            assert RequestCoordinator().create(other, "bertil", 1)

    def test_concurrent_update_is_a_conflict(self):
        assert issubclass(ConcurrentUpdate, ConflictError)


class TestRacingApprovals:
    def test_exactly_one_approval_wins(self, offer_id):
        coordinator = RequestCoordinator()
        first = coordinator.create(offer_id, "bertil", 2)
        second = coordinator.create(offer_id, "cecilia", 3)

        outcomes = _race(
            lambda: coordinator.approve(offer_id, first, "anna"),
            lambda: coordinator.approve(offer_id, second, "anna"),
        )

        winners, losers = _split(outcomes)
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0], ConflictError)

        offer = SharingRegistry().get(offer_id)
        assert len(offer.requests_in(RequestStatus.APPROVED)) == 1
        assert offer.requests_in(RequestStatus.PENDING) == []

    def test_racing_completions_decrement_once(self, neighbourhood, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        coordinator.approve(offer_id, request_id, "anna")

        outcomes = _race(
            lambda: coordinator.complete(offer_id, request_id, "anna"),
            lambda: coordinator.complete(offer_id, request_id, "bertil"),
        )

        assert len([o for o in outcomes if isinstance(o, ConflictError)]) == 1
        assert InventoryStore().get(neighbourhood.resource_id).quantity == 8

    def test_cancel_racing_complete(self, neighbourhood, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        coordinator.approve(offer_id, request_id, "anna")

        outcomes = _race(
            lambda: coordinator.cancel(offer_id, request_id, "bertil"),
            lambda: coordinator.complete(offer_id, request_id, "anna"),
        )

        winners, losers = _split(outcomes)
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0], ConflictError)

        status = SharingRegistry().get(offer_id).request_by_id(request_id).status
        quantity = InventoryStore().get(neighbourhood.resource_id).quantity
        if status == RequestStatus.COMPLETED.value:
            assert quantity == 8
        else:
            assert status == RequestStatus.CANCELLED.value
            assert quantity == 10


class TestRacingPublications:
    def test_one_stockpile_line_is_never_overpromised(self, neighbourhood):
        registry = SharingRegistry()

        def publish():
            return registry.publish(
                actor_id="anna",
                resource_id=neighbourhood.resource_id,
                community_id=neighbourhood.community_id,
                quantity=8,
            )

        for _ in range(5):
            outcomes = _race(publish, publish)
            winners, losers = _split(outcomes)
            assert len(winners) == 1
            assert len(losers) == 1
            assert isinstance(losers[0], (InsufficientQuantity, ConcurrentUpdate))
            assert committed_quantity(neighbourhood.resource_id) == 8

            registry.withdraw(winners[0], "anna")

    def test_publishing_bumps_the_resource(self, neighbourhood):
        before = InventoryStore().get(neighbourhood.resource_id)._version
        SharingRegistry().publish(
            actor_id="anna",
            resource_id=neighbourhood.resource_id,
            community_id=neighbourhood.community_id,
            quantity=3,
        )
        assert InventoryStore().get(neighbourhood.resource_id)._version > before


class TestLostVersionRaces:
    def test_completion_losing_to_a_stockpile_edit(self, monkeypatch, neighbourhood, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        coordinator.approve(offer_id, request_id, "anna")

        hand_off = Resource.hand_off

        def edited_meanwhile(resource, quantity):
            # Every attempt, retries included, loses to an owner edit
            _in_other_context(
                lambda: InventoryStore().update_resource(
                    neighbourhood.resource_id, "anna", notes="Moved to the cellar"
                )
            )
            return hand_off(resource, quantity)

        monkeypatch.setattr(Resource, "hand_off", edited_meanwhile)

        with pytest.raises(ConcurrentUpdate):
            coordinator.complete(offer_id, request_id, "anna")

        assert SharingRegistry().get(offer_id).request_by_id(request_id).status == RequestStatus.APPROVED.value
        resource = InventoryStore().get(neighbourhood.resource_id)
        assert resource.quantity == 10
        assert resource.notes == "Moved to the cellar"
        assert str(offer_id) not in offer_guard.in_flight()

    def test_stockpile_edit_losing_to_another_edit(self, monkeypatch, neighbourhood):
        caller = threading.current_thread()
        update_details = Resource.update_details

        def edited_meanwhile(resource, **changes):
            if threading.current_thread() is caller:
                _in_other_context(
                    lambda: InventoryStore().update_resource(neighbourhood.resource_id, "anna", quantity=4)
                )
            return update_details(resource, **changes)

        monkeypatch.setattr(Resource, "update_details", edited_meanwhile)

        with pytest.raises(ConcurrentUpdate):
            InventoryStore().update_resource(neighbourhood.resource_id, "anna", notes="Top shelf")

        resource = InventoryStore().get(neighbourhood.resource_id)
        assert resource.quantity == 4
        assert resource.notes != "Top shelf"


class TestStaleReads:
    def test_approval_with_stale_revision_is_rejected(self, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        read_revision = SharingRegistry().get(offer_id).revision

        coordinator.create(offer_id, "cecilia", 1)

        with pytest.raises(StaleOffer):
            coordinator.approve(offer_id, request_id, "anna", expected_revision=read_revision)

    def test_current_revision_is_accepted(self, offer_id):
        coordinator = RequestCoordinator()
        request_id = coordinator.create(offer_id, "bertil", 2)
        revision = SharingRegistry().get(offer_id).revision
        assert coordinator.approve(offer_id, request_id, "anna", expected_revision=revision) == revision + 1
