"""FastAPI routes for the preparedness service.

Thin adapters that translate HTTP requests into domain operations. The
acting member arrives in the X-Actor-Id header.
"""

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from preparedness.api.schemas import (
    ActivityResponse,
    AddResourceRequest,
    CommunityIdResponse,
    CountResponse,
    CreateCommunityRequest,
    FulfillmentResponse,
    HelpRequestIdResponse,
    HelpRequestResponse,
    HelpRequestStatusRequest,
    JoinCommunityRequest,
    NotificationListResponse,
    NotificationResponse,
    OfferIdResponse,
    OfferResponse,
    PostHelpRequestRequest,
    PreparednessSummaryResponse,
    PublishOfferRequest,
    RequestIdResponse,
    ResourceIdResponse,
    ResourceRequestResponse,
    ResourceResponse,
    RespondRequest,
    ReviseOfferRequest,
    RevisionResponse,
    SharedSummaryResponse,
    StatusResponse,
    SubmitRequestRequest,
    TransitionRequest,
    UpdateResourceRequest,
)
from preparedness.community.management import CreateCommunity, JoinCommunity, LeaveCommunity
from preparedness.errors import AuthorizationError, NotOwner, NotRecipient, NotRequester
from preparedness.inventory.store import InventoryStore
from preparedness.notifications.inbox import Inbox
from preparedness.projections.community_activity import recent_activity
from preparedness.projections.status import StatusProjector
from preparedness.sharing.coordinator import RequestCoordinator
from preparedness.sharing.help_board import HelpBoard
from preparedness.sharing.registry import SharingRegistry

inventory_store = InventoryStore()
sharing_registry = SharingRegistry()
request_coordinator = RequestCoordinator()
help_board = HelpBoard()
inbox = Inbox()
status_projector = StatusProjector()


def _resource_response(resource) -> ResourceResponse:
    return ResourceResponse(
        resource_id=str(resource.id),
        owner_id=str(resource.owner_id),
        name=resource.name,
        category=resource.category,
        quantity=resource.quantity,
        unit=resource.unit,
        shelf_life_days=resource.shelf_life_days,
        days_remaining=resource.days_remaining(),
        is_recommended=bool(resource.is_recommended),
        notes=resource.notes,
        added_at=resource.added_at,
    )


def _offer_response(offer) -> OfferResponse:
    return OfferResponse(
        offer_id=str(offer.id),
        source_resource_id=str(offer.source_resource_id),
        owner_id=str(offer.owner_id),
        community_id=str(offer.community_id),
        resource_name=offer.resource_name,
        resource_category=offer.resource_category,
        resource_unit=offer.resource_unit,
        offered_quantity=offer.offered_quantity,
        status=offer.status,
        available_until=offer.available_until,
        location=offer.location,
        notes=offer.notes,
        revision=offer.revision or 0,
        requests=[
            ResourceRequestResponse(
                request_id=str(r.id),
                requester_id=str(r.requester_id),
                requested_quantity=r.requested_quantity,
                status=r.status,
                message=r.message,
                response_message=r.response_message,
                auto_denied=bool(r.auto_denied),
                requested_at=r.requested_at,
            )
            for r in sorted(offer.requests or [], key=lambda r: r.requested_at)
        ],
        created_at=offer.created_at,
    )


def _help_request_response(help_request) -> HelpRequestResponse:
    return HelpRequestResponse(
        help_request_id=str(help_request.id),
        requester_id=str(help_request.requester_id),
        community_id=str(help_request.community_id),
        title=help_request.title,
        description=help_request.description,
        category=help_request.category,
        urgency=help_request.urgency,
        priority=help_request.priority,
        status=help_request.status,
        location=help_request.location,
        created_at=help_request.created_at,
        updated_at=help_request.updated_at,
    )


def _notification_response(notification) -> NotificationResponse:
    return NotificationResponse(
        notification_id=str(notification.id),
        recipient_id=str(notification.recipient_id),
        notification_type=notification.notification_type,
        title=notification.title,
        content=notification.content,
        sender_name=notification.sender_name,
        action_url=notification.action_url,
        is_read=bool(notification.is_read),
        read_at=notification.read_at,
        created_at=notification.created_at,
    )


# ---------------------------------------------------------------------------
# Communities
# ---------------------------------------------------------------------------
community_router = APIRouter(prefix="/communities", tags=["communities"])


@community_router.post("", status_code=201, response_model=CommunityIdResponse)
async def create_community(body: CreateCommunityRequest, x_actor_id: str = Header()) -> CommunityIdResponse:
    command = CreateCommunity(
        name=body.name,
        description=body.description,
        created_by=x_actor_id,
        display_name=body.display_name,
    )
    result = current_domain.process(command, asynchronous=False)
    return CommunityIdResponse(community_id=result)


@community_router.post("/{community_id}/members", status_code=201, response_model=StatusResponse)
async def join_community(
    community_id: str, body: JoinCommunityRequest, x_actor_id: str = Header()
) -> StatusResponse:
    command = JoinCommunity(
        community_id=community_id,
        member_id=x_actor_id,
        display_name=body.display_name,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@community_router.delete("/{community_id}/members/{member_id}", response_model=StatusResponse)
async def leave_community(community_id: str, member_id: str, x_actor_id: str = Header()) -> StatusResponse:
    if member_id != x_actor_id:
        raise AuthorizationError("Members can only remove themselves")
    current_domain.process(LeaveCommunity(community_id=community_id, member_id=member_id), asynchronous=False)
    return StatusResponse()


@community_router.get("/{community_id}/activity", response_model=list[ActivityResponse])
async def community_activity(community_id: str, limit: int = 20) -> list[ActivityResponse]:
    return [
        ActivityResponse(
            activity_id=str(a.activity_id),
            activity_type=a.activity_type,
            title=a.title,
            description=a.description,
            user_id=str(a.user_id) if a.user_id else None,
            resource_name=a.resource_name,
            created_at=a.created_at,
        )
        for a in recent_activity(community_id, limit=limit)
    ]


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------
resource_router = APIRouter(prefix="/resources", tags=["resources"])


@resource_router.post("", status_code=201, response_model=ResourceIdResponse)
async def add_resource(body: AddResourceRequest, x_actor_id: str = Header()) -> ResourceIdResponse:
    resource_id = inventory_store.add_resource(owner_id=x_actor_id, **body.model_dump())
    return ResourceIdResponse(resource_id=resource_id)


@resource_router.put("/{resource_id}", response_model=StatusResponse)
async def update_resource(resource_id: str, body: UpdateResourceRequest, x_actor_id: str = Header()) -> StatusResponse:
    inventory_store.update_resource(resource_id, x_actor_id, **body.model_dump(exclude_none=True))
    return StatusResponse()


@resource_router.delete("/{resource_id}", response_model=StatusResponse)
async def remove_resource(resource_id: str, x_actor_id: str = Header()) -> StatusResponse:
    inventory_store.remove_resource(resource_id, x_actor_id)
    return StatusResponse()


@resource_router.get("", response_model=list[ResourceResponse])
async def list_resources(owner_id: str, x_actor_id: str = Header()) -> list[ResourceResponse]:
    if owner_id != x_actor_id:
        raise NotOwner("A stockpile is only visible to its owner")
    return [_resource_response(r) for r in inventory_store.resources_of(owner_id)]


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------
offer_router = APIRouter(prefix="/offers", tags=["offers"])


@offer_router.post("", status_code=201, response_model=OfferIdResponse)
async def publish_offer(body: PublishOfferRequest, x_actor_id: str = Header()) -> OfferIdResponse:
    offer_id = sharing_registry.publish(actor_id=x_actor_id, **body.model_dump())
    return OfferIdResponse(offer_id=offer_id)


@offer_router.put("/{offer_id}", response_model=RevisionResponse)
async def revise_offer(offer_id: str, body: ReviseOfferRequest, x_actor_id: str = Header()) -> RevisionResponse:
    revision = sharing_registry.revise(offer_id, x_actor_id, **body.model_dump(exclude_none=True))
    return RevisionResponse(revision=revision)


@offer_router.delete("/{offer_id}", response_model=StatusResponse)
async def withdraw_offer(offer_id: str, x_actor_id: str = Header()) -> StatusResponse:
    sharing_registry.withdraw(offer_id, x_actor_id)
    return StatusResponse()


@offer_router.get("", response_model=list[OfferResponse])
async def list_offers(
    community_id: str | None = None,
    owner_id: str | None = None,
    x_actor_id: str | None = Header(default=None),
) -> list[OfferResponse]:
    if community_id:
        offers = sharing_registry.community_offers(community_id, viewer_id=x_actor_id)
    elif owner_id:
        offers = sharing_registry.offers_by_owner(owner_id)
    else:
        offers = []
    return [_offer_response(o) for o in offers]


@offer_router.get("/{offer_id}", response_model=OfferResponse)
async def get_offer(offer_id: str) -> OfferResponse:
    return _offer_response(sharing_registry.get(offer_id))


@offer_router.post("/{offer_id}/requests", status_code=201, response_model=RequestIdResponse)
async def submit_request(offer_id: str, body: SubmitRequestRequest, x_actor_id: str = Header()) -> RequestIdResponse:
    request_id = request_coordinator.create(
        offer_id,
        requester_id=x_actor_id,
        quantity=body.quantity,
        message=body.message,
        expected_revision=body.expected_revision,
    )
    return RequestIdResponse(request_id=request_id)


@offer_router.put("/{offer_id}/requests/{request_id}/approve", response_model=RevisionResponse)
async def approve_request(
    offer_id: str, request_id: str, body: RespondRequest, x_actor_id: str = Header()
) -> RevisionResponse:
    revision = request_coordinator.approve(offer_id, request_id, x_actor_id, **body.model_dump())
    return RevisionResponse(revision=revision)


@offer_router.put("/{offer_id}/requests/{request_id}/deny", response_model=RevisionResponse)
async def deny_request(
    offer_id: str, request_id: str, body: RespondRequest, x_actor_id: str = Header()
) -> RevisionResponse:
    revision = request_coordinator.deny(offer_id, request_id, x_actor_id, **body.model_dump())
    return RevisionResponse(revision=revision)


@offer_router.put("/{offer_id}/requests/{request_id}/complete", response_model=RevisionResponse)
async def complete_request(
    offer_id: str, request_id: str, body: TransitionRequest, x_actor_id: str = Header()
) -> RevisionResponse:
    revision = request_coordinator.complete(offer_id, request_id, x_actor_id, **body.model_dump())
    return RevisionResponse(revision=revision)


@offer_router.put("/{offer_id}/requests/{request_id}/cancel", response_model=RevisionResponse)
async def cancel_request(
    offer_id: str, request_id: str, body: TransitionRequest, x_actor_id: str = Header()
) -> RevisionResponse:
    revision = request_coordinator.cancel(offer_id, request_id, x_actor_id, **body.model_dump())
    return RevisionResponse(revision=revision)


# ---------------------------------------------------------------------------
# Help requests
# ---------------------------------------------------------------------------
help_router = APIRouter(prefix="/help-requests", tags=["help-requests"])


@help_router.post("", status_code=201, response_model=HelpRequestIdResponse)
async def post_help_request(body: PostHelpRequestRequest, x_actor_id: str = Header()) -> HelpRequestIdResponse:
    help_request_id = help_board.post(requester_id=x_actor_id, **body.model_dump())
    return HelpRequestIdResponse(help_request_id=help_request_id)


@help_router.get("", response_model=list[HelpRequestResponse])
async def list_help_requests(
    community_id: str | None = None,
    requester_id: str | None = None,
    x_actor_id: str = Header(),
) -> list[HelpRequestResponse]:
    if community_id:
        requests = help_board.community_requests(community_id, viewer_id=x_actor_id)
    elif requester_id:
        if requester_id != x_actor_id:
            raise NotRequester("Members can only list their own help requests")
        requests = help_board.requests_of(requester_id)
    else:
        requests = []
    return [_help_request_response(r) for r in requests]


@help_router.get("/{help_request_id}", response_model=HelpRequestResponse)
async def get_help_request(help_request_id: str) -> HelpRequestResponse:
    return _help_request_response(help_board.get(help_request_id))


@help_router.put("/{help_request_id}/status", response_model=StatusResponse)
async def change_help_request_status(
    help_request_id: str, body: HelpRequestStatusRequest, x_actor_id: str = Header()
) -> StatusResponse:
    help_board.change_status(help_request_id, x_actor_id, body.status)
    return StatusResponse()


@help_router.delete("/{help_request_id}", response_model=StatusResponse)
async def delete_help_request(help_request_id: str, x_actor_id: str = Header()) -> StatusResponse:
    help_board.delete(help_request_id, x_actor_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("/{recipient_id}", response_model=NotificationListResponse)
async def list_notifications(
    recipient_id: str, unread_only: bool = False, x_actor_id: str = Header()
) -> NotificationListResponse:
    if recipient_id != x_actor_id:
        raise NotRecipient()
    items = inbox.list(recipient_id, unread_only=unread_only)
    return NotificationListResponse(
        notifications=[_notification_response(n) for n in items],
        total=len(items),
    )


@notification_router.get("/{recipient_id}/unread-count", response_model=CountResponse)
async def unread_count(recipient_id: str, x_actor_id: str = Header()) -> CountResponse:
    if recipient_id != x_actor_id:
        raise NotRecipient()
    return CountResponse(count=inbox.unread_count(recipient_id))


@notification_router.put("/{recipient_id}/read-all", response_model=CountResponse)
async def mark_all_read(recipient_id: str, x_actor_id: str = Header()) -> CountResponse:
    if recipient_id != x_actor_id:
        raise NotRecipient()
    return CountResponse(count=inbox.mark_all_read(recipient_id))


@notification_router.put("/{notification_id}/read", response_model=StatusResponse)
async def mark_read(notification_id: str, x_actor_id: str = Header()) -> StatusResponse:
    inbox.mark_read(notification_id, x_actor_id)
    return StatusResponse()


@notification_router.delete("/{notification_id}", response_model=StatusResponse)
async def delete_notification(notification_id: str, x_actor_id: str = Header()) -> StatusResponse:
    inbox.delete(notification_id, x_actor_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------
status_router = APIRouter(prefix="/status", tags=["status"])


def _assert_self(user_id, actor_id) -> None:
    if user_id != actor_id:
        raise NotOwner("Members can only see their own status")


@status_router.get("/offers/{offer_id}/pending-count", response_model=CountResponse)
async def pending_request_count(offer_id: str) -> CountResponse:
    return CountResponse(count=status_projector.pending_request_count(offer_id))


@status_router.get("/users/{user_id}/fulfillment", response_model=FulfillmentResponse)
async def fulfillment(user_id: str, x_actor_id: str = Header()) -> FulfillmentResponse:
    _assert_self(user_id, x_actor_id)
    return FulfillmentResponse(user_id=user_id, fulfillment_percent=status_projector.fulfillment_percent(user_id))


@status_router.get("/users/{user_id}/shared-summary", response_model=SharedSummaryResponse)
async def shared_summary(user_id: str, x_actor_id: str = Header()) -> SharedSummaryResponse:
    _assert_self(user_id, x_actor_id)
    return SharedSummaryResponse(**status_projector.shared_summary(user_id))


@status_router.get("/users/{user_id}/preparedness", response_model=PreparednessSummaryResponse)
async def preparedness_summary(user_id: str, x_actor_id: str = Header()) -> PreparednessSummaryResponse:
    _assert_self(user_id, x_actor_id)
    return PreparednessSummaryResponse(**status_projector.preparedness_summary(user_id))
