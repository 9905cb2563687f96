"""Pydantic request/response schemas for the preparedness API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Community
# ---------------------------------------------------------------------------
class CreateCommunityRequest(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    description: str | None = None
    display_name: str = Field(min_length=1, max_length=100)

    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Storgatan 12", "description": "Our building", "display_name": "Anna"}]
        }
    }


class JoinCommunityRequest(BaseModel):
    display_name: str = Field(min_length=1, max_length=100)


class CommunityIdResponse(BaseModel):
    community_id: str


class ActivityResponse(BaseModel):
    activity_id: str
    activity_type: str
    title: str
    description: str | None = None
    user_id: str | None = None
    resource_name: str | None = None
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------
class AddResourceRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    category: str
    quantity: float = Field(ge=0)
    unit: str = Field(min_length=1, max_length=30)
    shelf_life_days: int | None = Field(default=None, ge=1)
    is_recommended: bool = False
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Bottled water", "category": "water", "quantity": 24, "unit": "liters", "shelf_life_days": 365}
            ]
        }
    }


class UpdateResourceRequest(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    category: str | None = None
    quantity: float | None = Field(default=None, ge=0)
    unit: str | None = Field(default=None, max_length=30)
    shelf_life_days: int | None = Field(default=None, ge=1)
    is_recommended: bool | None = None
    notes: str | None = None


class ResourceIdResponse(BaseModel):
    resource_id: str


class ResourceResponse(BaseModel):
    resource_id: str
    owner_id: str
    name: str
    category: str
    quantity: float
    unit: str
    shelf_life_days: int | None = None
    days_remaining: int | None = None
    is_recommended: bool
    notes: str | None = None
    added_at: datetime | None = None


# ---------------------------------------------------------------------------
# Offers and requests
# ---------------------------------------------------------------------------
class PublishOfferRequest(BaseModel):
    resource_id: str
    community_id: str
    quantity: float
    available_until: datetime | None = None
    location: str | None = Field(default=None, max_length=255)
    notes: str | None = None


class ReviseOfferRequest(BaseModel):
    quantity: float | None = None
    available_until: datetime | None = None
    location: str | None = Field(default=None, max_length=255)
    notes: str | None = None
    expected_revision: int | None = None


class OfferIdResponse(BaseModel):
    offer_id: str


class SubmitRequestRequest(BaseModel):
    quantity: float
    message: str | None = None
    expected_revision: int | None = None


class RespondRequest(BaseModel):
    response_message: str | None = None
    expected_revision: int | None = None


class TransitionRequest(BaseModel):
    expected_revision: int | None = None


class RequestIdResponse(BaseModel):
    request_id: str


class RevisionResponse(BaseModel):
    status: str = "ok"
    revision: int | None = None


class ResourceRequestResponse(BaseModel):
    request_id: str
    requester_id: str
    requested_quantity: float
    status: str
    message: str | None = None
    response_message: str | None = None
    auto_denied: bool = False
    requested_at: datetime | None = None


class OfferResponse(BaseModel):
    offer_id: str
    source_resource_id: str
    owner_id: str
    community_id: str
    resource_name: str
    resource_category: str
    resource_unit: str
    offered_quantity: float
    status: str
    available_until: datetime | None = None
    location: str | None = None
    notes: str | None = None
    revision: int
    requests: list[ResourceRequestResponse] = []
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Help requests
# ---------------------------------------------------------------------------
class PostHelpRequestRequest(BaseModel):
    community_id: str
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    category: str = "other"
    urgency: str = "medium"
    location: str | None = Field(default=None, max_length=255)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "community_id": "c-1",
                    "title": "Need a camping stove",
                    "description": "Power has been out since Tuesday",
                    "category": "energy",
                    "urgency": "high",
                }
            ]
        }
    }


class HelpRequestStatusRequest(BaseModel):
    status: str


class HelpRequestIdResponse(BaseModel):
    help_request_id: str


class HelpRequestResponse(BaseModel):
    help_request_id: str
    requester_id: str
    community_id: str
    title: str
    description: str
    category: str
    urgency: str
    priority: int
    status: str
    location: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
class NotificationResponse(BaseModel):
    notification_id: str
    recipient_id: str
    notification_type: str
    title: str
    content: str
    sender_name: str | None = None
    action_url: str | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int


class CountResponse(BaseModel):
    count: int


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------
class FulfillmentResponse(BaseModel):
    user_id: str
    fulfillment_percent: int


class SharedSummaryResponse(BaseModel):
    available: int = 0
    requested: int = 0
    taken: int = 0
    total: int = 0


class PreparednessSummaryResponse(BaseModel):
    total_resources: int
    filled_resources: int
    recommended_total: int
    recommended_filled: int
    expiring_soon: int
    fulfillment_percent: int
