"""Domain events for the SharedOffer aggregate.

Request events carry enough of the offer (owner, community, resource name and
unit) for the notification dispatcher and the activity projector to act
without reloading the aggregate.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from preparedness.domain import preparedness


@preparedness.event(part_of="SharedOffer")
class OfferPublished:
    """A member offered part of a resource to one of their communities."""

    __version__ = "v1"

    offer_id = Identifier(required=True)
    source_resource_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    community_id = Identifier(required=True)
    resource_name = String(required=True)
    resource_category = String(required=True)
    resource_unit = String(required=True)
    offered_quantity = Float(required=True)
    published_at = DateTime(required=True)


@preparedness.event(part_of="SharedOffer")
class OfferRevised:
    __version__ = "v1"

    offer_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    offered_quantity = Float(required=True)
    revision = Integer(required=True)
    revised_at = DateTime(required=True)


@preparedness.event(part_of="SharedOffer")
class RequestSubmitted:
    """A member asked for a share of an available offer."""

    __version__ = "v1"

    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    community_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    resource_name = String(required=True)
    resource_unit = String(required=True)
    requested_quantity = Float(required=True)
    message = Text()
    requested_at = DateTime(required=True)


@preparedness.event(part_of="SharedOffer")
class RequestApproved:
    """The owner approved a request; the offer is now reserved for it."""

    __version__ = "v1"

    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    community_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    resource_name = String(required=True)
    resource_unit = String(required=True)
    requested_quantity = Float(required=True)
    response_message = Text()
    approved_at = DateTime(required=True)


@preparedness.event(part_of="SharedOffer")
class RequestDenied:
    """A request was turned down by the owner, or displaced by an approval.

    `auto_denied` is set when the denial is the side effect of approving a
    competing request on the same offer.
    """

    __version__ = "v1"

    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    community_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    resource_name = String(required=True)
    resource_unit = String(required=True)
    requested_quantity = Float(required=True)
    response_message = Text()
    auto_denied = Boolean(default=False)
    denied_at = DateTime(required=True)


@preparedness.event(part_of="SharedOffer")
class RequestCompleted:
    """The exchange happened; the offer is taken and the stockpile shrank."""

    __version__ = "v1"

    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    community_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    completed_by = Identifier(required=True)
    source_resource_id = Identifier(required=True)
    resource_name = String(required=True)
    resource_unit = String(required=True)
    requested_quantity = Float(required=True)
    completed_at = DateTime(required=True)


@preparedness.event(part_of="SharedOffer")
class RequestCancelled:
    __version__ = "v1"

    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    community_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    resource_name = String(required=True)
    resource_unit = String(required=True)
    requested_quantity = Float(required=True)
    was_approved = Boolean(default=False)
    cancelled_at = DateTime(required=True)


@preparedness.event(part_of="HelpRequest")
class HelpRequested:
    """A member asked their community for help with something they lack."""

    __version__ = "v1"

    help_request_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    community_id = Identifier(required=True)
    title = String(required=True)
    category = String(required=True)
    urgency = String(required=True)
    priority = Integer(required=True)
    requested_at = DateTime(required=True)


@preparedness.event(part_of="HelpRequest")
class HelpRequestStatusChanged:
    __version__ = "v1"

    help_request_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    community_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    changed_at = DateTime(required=True)
