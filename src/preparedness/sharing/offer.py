"""SharedOffer aggregate (CQRS) — a portion of a resource offered to a community.

The offer owns its ResourceRequest children, so every request transition and
its effect on the offer are saved together in one unit of work.

State Machines:
    Offer:    AVAILABLE → REQUESTED → TAKEN
              REQUESTED → AVAILABLE   (approved request cancelled)

    Request:  PENDING → APPROVED → COMPLETED
              PENDING → DENIED
              {PENDING, APPROVED} → CANCELLED

At most one request per offer is APPROVED. Approving a request denies every
other pending request on the same offer (`auto_denied`).

`revision` increases on every change and doubles as a compare-and-swap token
for callers that pass `expected_revision`.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from preparedness.domain import preparedness
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
from preparedness.sharing.events import (
    OfferPublished,
    OfferRevised,
    RequestApproved,
    RequestCancelled,
    RequestCompleted,
    RequestDenied,
    RequestSubmitted,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OfferStatus(Enum):
    AVAILABLE = "available"
    REQUESTED = "requested"
    TAKEN = "taken"


class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_OFFER_TRANSITIONS = {
    OfferStatus.AVAILABLE: {OfferStatus.REQUESTED},
    OfferStatus.REQUESTED: {OfferStatus.TAKEN, OfferStatus.AVAILABLE},
    OfferStatus.TAKEN: set(),  # terminal
}

_REQUEST_TRANSITIONS = {
    RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.DENIED, RequestStatus.CANCELLED},
    RequestStatus.APPROVED: {RequestStatus.COMPLETED, RequestStatus.CANCELLED},
    RequestStatus.DENIED: set(),  # terminal
    RequestStatus.COMPLETED: set(),  # terminal
    RequestStatus.CANCELLED: set(),  # terminal
}

ACTIVE_OFFER_STATUSES = {OfferStatus.AVAILABLE.value, OfferStatus.REQUESTED.value}
ACTIVE_REQUEST_STATUSES = {RequestStatus.PENDING.value, RequestStatus.APPROVED.value}

AUTO_DENY_MESSAGE = "Another request for this offer was approved"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@preparedness.entity(part_of="SharedOffer")
class ResourceRequest:
    """One member's claim on part of an offer."""

    requester_id = Identifier(required=True)
    requested_quantity = Float(required=True)
    status = String(choices=RequestStatus, default=RequestStatus.PENDING.value)
    message = Text()
    response_message = Text()
    auto_denied = Boolean(default=False)
    requested_at = DateTime()
    approved_at = DateTime()
    denied_at = DateTime()
    completed_at = DateTime()
    cancelled_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@preparedness.aggregate
class SharedOffer:
    source_resource_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    community_id = Identifier(required=True)
    resource_name = String(required=True, max_length=200)
    resource_category = String(required=True, max_length=30)
    resource_unit = String(required=True, max_length=30)
    offered_quantity = Float(required=True)
    status = String(choices=OfferStatus, default=OfferStatus.AVAILABLE.value)
    available_until = DateTime()
    location = String(max_length=255)
    notes = Text()
    revision = Integer(default=0)
    requests = HasMany(ResourceRequest)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def publish(
        cls,
        resource,
        community_id,
        quantity,
        available_until=None,
        location=None,
        notes=None,
    ):
        """Offer `quantity` of `resource` to a community.

        Ownership, membership and the committed-quantity check need other
        aggregates and are done by the publishing handler.
        """
        if quantity is None or quantity <= 0:
            raise ValidationError({"offered_quantity": ["Offered quantity must be positive"]})

        now = datetime.now(UTC)
        offer = cls(
            source_resource_id=str(resource.id),
            owner_id=str(resource.owner_id),
            community_id=community_id,
            resource_name=resource.name,
            resource_category=resource.category,
            resource_unit=resource.unit,
            offered_quantity=quantity,
            status=OfferStatus.AVAILABLE.value,
            available_until=available_until,
            location=location,
            notes=notes,
            revision=1,
            created_at=now,
            updated_at=now,
        )
        offer.raise_(
            OfferPublished(
                offer_id=str(offer.id),
                source_resource_id=str(resource.id),
                owner_id=str(resource.owner_id),
                community_id=str(community_id),
                resource_name=resource.name,
                resource_category=resource.category,
                resource_unit=resource.unit,
                offered_quantity=quantity,
                published_at=now,
            )
        )
        return offer

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _touch(self):
        now = datetime.now(UTC)
        self.revision = (self.revision or 0) + 1
        self.updated_at = now
        return now

    def _move_offer(self, target: OfferStatus, error_cls) -> None:
        current = OfferStatus(self.status)
        if target not in _OFFER_TRANSITIONS.get(current, set()):
            raise error_cls(f"Offer cannot move from {current.value} to {target.value}")
        self.status = target.value

    @staticmethod
    def _move_request(request, target: RequestStatus, error_cls) -> None:
        current = RequestStatus(request.status)
        if target not in _REQUEST_TRANSITIONS.get(current, set()):
            raise error_cls(f"Request cannot move from {current.value} to {target.value}")
        request.status = target.value

    def _request_fields(self, request):
        """Offer context shared by every request event."""
        return {
            "offer_id": str(self.id),
            "request_id": str(request.id),
            "community_id": str(self.community_id),
            "owner_id": str(self.owner_id),
            "requester_id": str(request.requester_id),
            "resource_name": self.resource_name,
            "resource_unit": self.resource_unit,
            "requested_quantity": request.requested_quantity,
        }

    def assert_owner(self, actor_id) -> None:
        if str(self.owner_id) != str(actor_id):
            raise NotOwner("Only the offer owner can do this")

    def check_revision(self, expected_revision) -> None:
        if expected_revision is not None and expected_revision != self.revision:
            raise StaleOffer(f"Offer is at revision {self.revision}, expected {expected_revision}")

    def request_by_id(self, request_id):
        request = next(
            (r for r in (self.requests or []) if str(r.id) == str(request_id)),
            None,
        )
        if request is None:
            raise ObjectNotFoundError({"request_id": [f"Request {request_id} not found on offer {self.id}"]})
        return request

    def requests_in(self, *statuses: RequestStatus):
        wanted = {s.value for s in statuses}
        return [r for r in (self.requests or []) if r.status in wanted]

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_OFFER_STATUSES

    @property
    def remaining_quantity(self) -> float:
        handed_off = sum(r.requested_quantity for r in self.requests_in(RequestStatus.COMPLETED))
        return self.offered_quantity - handed_off

    # -------------------------------------------------------------------
    # Owner edits
    # -------------------------------------------------------------------
    def revise(self, quantity=None, available_until=None, location=None, notes=None):
        """Change an available offer. Quantity limits are checked by the handler."""
        if self.status != OfferStatus.AVAILABLE.value:
            raise OfferNotEditable()
        if quantity is not None and quantity <= 0:
            raise ValidationError({"offered_quantity": ["Offered quantity must be positive"]})

        if quantity is not None:
            self.offered_quantity = quantity
        if available_until is not None:
            self.available_until = available_until
        if location is not None:
            self.location = location
        if notes is not None:
            self.notes = notes

        now = self._touch()
        self.raise_(
            OfferRevised(
                offer_id=str(self.id),
                owner_id=str(self.owner_id),
                offered_quantity=self.offered_quantity,
                revision=self.revision,
                revised_at=now,
            )
        )

    def assert_withdrawable(self) -> None:
        if self.requests_in(*(RequestStatus(s) for s in ACTIVE_REQUEST_STATUSES)):
            raise OfferHasActiveRequest()
        if self.status == OfferStatus.TAKEN.value:
            raise OfferNotEditable("A taken offer cannot be withdrawn")

    # -------------------------------------------------------------------
    # Request lifecycle
    # -------------------------------------------------------------------
    def submit_request(self, requester_id, quantity, message=None, requester_is_member=True):
        """Record a pending request. Several may be pending at once."""
        if self.status != OfferStatus.AVAILABLE.value:
            raise OfferNotAvailable()
        if str(requester_id) == str(self.owner_id):
            raise SelfRequest()
        if not requester_is_member:
            raise NotCommunityMember()
        if quantity is None or quantity <= 0:
            raise ValidationError({"requested_quantity": ["Requested quantity must be positive"]})
        if quantity > self.remaining_quantity:
            raise QuantityExceedsOffer(
                f"Requested {quantity:g} {self.resource_unit} but only {self.remaining_quantity:g} is offered"
            )

        now = self._touch()
        request = ResourceRequest(
            requester_id=requester_id,
            requested_quantity=quantity,
            status=RequestStatus.PENDING.value,
            message=message,
            requested_at=now,
        )
        self.add_requests(request)
        self.raise_(RequestSubmitted(**self._request_fields(request), message=message, requested_at=now))
        return request

    def approve(self, request_id, actor_id, response_message=None):
        """Approve one pending request and deny every other pending one."""
        self.assert_owner(actor_id)
        if self.status != OfferStatus.AVAILABLE.value:
            raise OfferNotAvailable()

        request = self.request_by_id(request_id)
        if request.status != RequestStatus.PENDING.value:
            raise RequestNotPending()
        if request.requested_quantity > self.remaining_quantity:
            raise QuantityExceedsOffer("Requested quantity no longer fits the offer")

        now = self._touch()
        self._move_request(request, RequestStatus.APPROVED, RequestNotPending)
        self._move_offer(OfferStatus.REQUESTED, OfferNotAvailable)
        request.approved_at = now
        request.response_message = response_message
        self.raise_(RequestApproved(**self._request_fields(request), response_message=response_message, approved_at=now))

        for sibling in self.requests_in(RequestStatus.PENDING):
            self._move_request(sibling, RequestStatus.DENIED, RequestNotPending)
            sibling.auto_denied = True
            sibling.denied_at = now
            sibling.response_message = AUTO_DENY_MESSAGE
            self.raise_(
                RequestDenied(
                    **self._request_fields(sibling),
                    response_message=AUTO_DENY_MESSAGE,
                    auto_denied=True,
                    denied_at=now,
                )
            )
        return request

    def deny(self, request_id, actor_id, response_message=None):
        self.assert_owner(actor_id)
        request = self.request_by_id(request_id)
        if request.status != RequestStatus.PENDING.value:
            raise RequestNotPending()

        now = self._touch()
        self._move_request(request, RequestStatus.DENIED, RequestNotPending)
        request.denied_at = now
        request.response_message = response_message
        self.raise_(
            RequestDenied(
                **self._request_fields(request),
                response_message=response_message,
                auto_denied=False,
                denied_at=now,
            )
        )
        return request

    def complete(self, request_id, actor_id):
        """Mark the approved exchange as done and the offer as taken.

        The caller hands the quantity off the source resource in the same
        unit of work.
        """
        request = self.request_by_id(request_id)
        if str(actor_id) not in (str(self.owner_id), str(request.requester_id)):
            raise AuthorizationError("Only the owner or the requester can complete this exchange")
        if request.status != RequestStatus.APPROVED.value:
            raise RequestNotApproved()

        now = self._touch()
        self._move_request(request, RequestStatus.COMPLETED, RequestNotApproved)
        self._move_offer(OfferStatus.TAKEN, RequestNotApproved)
        request.completed_at = now
        self.raise_(
            RequestCompleted(
                **self._request_fields(request),
                completed_by=str(actor_id),
                source_resource_id=str(self.source_resource_id),
                completed_at=now,
            )
        )
        return request

    def cancel(self, request_id, actor_id):
        """Withdraw a pending or approved request. Only its requester may."""
        request = self.request_by_id(request_id)
        if str(actor_id) != str(request.requester_id):
            raise NotRequester()

        status = RequestStatus(request.status)
        if status == RequestStatus.COMPLETED:
            raise RequestNotApproved("Request was already completed")
        if status not in (RequestStatus.PENDING, RequestStatus.APPROVED):
            raise RequestNotPending()

        now = self._touch()
        self._move_request(request, RequestStatus.CANCELLED, RequestNotPending)
        if status == RequestStatus.APPROVED:
            self._move_offer(OfferStatus.AVAILABLE, RequestNotApproved)
        request.cancelled_at = now
        self.raise_(
            RequestCancelled(
                **self._request_fields(request),
                was_approved=status == RequestStatus.APPROVED,
                cancelled_at=now,
            )
        )
        return request
