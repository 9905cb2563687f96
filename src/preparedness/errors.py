"""Error taxonomy for the preparedness domain.

Four families reach callers unchanged:

    ValidationError     bad input (quantity, self-request, missing field)
    ConflictError       the target moved on before this operation applied
    AuthorizationError  caller is not the owner, requester or a member
    NotFoundError       dangling reference (Protean's ObjectNotFoundError)

ConflictError is the normal outcome of losing a race ("someone else already
acted") and is logged at info level, never as a fault. ConcurrentUpdate is
the one member that says nothing about the target's state: the caller ran into
another change in flight and may simply retry.
"""

from protean.exceptions import InvalidStateError, ObjectNotFoundError, ProteanException, ValidationError

NotFoundError = ObjectNotFoundError


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
class SelfRequest(ValidationError):
    def __init__(self, detail="You cannot request your own offer"):
        super().__init__({"requester_id": [detail]})


class QuantityExceedsOffer(ValidationError):
    def __init__(self, detail="Requested quantity exceeds the offered quantity"):
        super().__init__({"requested_quantity": [detail]})


class InsufficientQuantity(ValidationError):
    def __init__(self, detail="Quantity exceeds what the resource holds"):
        super().__init__({"quantity": [detail]})


# ---------------------------------------------------------------------------
# Conflict
# ---------------------------------------------------------------------------
class ConflictError(InvalidStateError):
    """Stale status: the operation lost to a transition that already happened."""

    default_detail = "The target was changed by another operation"

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__({type(self).__name__: [self.detail]})


class RequestNotPending(ConflictError):
    default_detail = "Request is no longer pending"


class RequestNotApproved(ConflictError):
    default_detail = "Request is not approved"


class OfferNotAvailable(ConflictError):
    default_detail = "Offer is not available"


class OfferNotEditable(ConflictError):
    default_detail = "Offer can only be changed while it is available"


class OfferHasActiveRequest(ConflictError):
    default_detail = "Offer has a pending or approved request"


class StaleOffer(ConflictError):
    default_detail = "Offer was modified since it was read"


class ConcurrentUpdate(ConflictError):
    """Another change to the same target is in flight or just committed. Safe to retry."""

    default_detail = "Another change to this target is in progress, try again"


class HelpRequestSettled(ConflictError):
    default_detail = "Help request is already settled"


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------
class AuthorizationError(ProteanException):
    """The caller is not allowed to act on the target."""

    default_detail = "Not allowed"

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__({type(self).__name__: [self.detail]})


class NotOwner(AuthorizationError):
    default_detail = "Only the owner can do this"


class NotRequester(AuthorizationError):
    default_detail = "Only the requester can do this"


class NotCommunityMember(AuthorizationError):
    default_detail = "You are not a member of this community"


class NotRecipient(AuthorizationError):
    default_detail = "Only the recipient can do this"


__all__ = [
    "AuthorizationError",
    "ConcurrentUpdate",
    "ConflictError",
    "HelpRequestSettled",
    "InsufficientQuantity",
    "NotCommunityMember",
    "NotFoundError",
    "NotOwner",
    "NotRecipient",
    "NotRequester",
    "OfferHasActiveRequest",
    "OfferNotAvailable",
    "OfferNotEditable",
    "QuantityExceedsOffer",
    "RequestNotApproved",
    "RequestNotPending",
    "SelfRequest",
    "StaleOffer",
    "ValidationError",
]
