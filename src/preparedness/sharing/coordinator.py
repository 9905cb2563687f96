"""RequestCoordinator — the request/offer state machine's entry points.

Each operation is one command processed under the offer guard, so racing
callers on the same offer get a ConflictError instead of waiting: create and
approve report OfferNotAvailable, the rest a retryable ConcurrentUpdate.
"""

import structlog

from preparedness.errors import OfferNotAvailable
from preparedness.sharing.guard import process_guarded
from preparedness.sharing.requests import (
    ApproveRequest,
    CancelRequest,
    CompleteRequest,
    DenyRequest,
    SubmitRequest,
)

logger = structlog.get_logger(__name__)


class RequestCoordinator:
    def create(self, offer_id, requester_id, quantity, message=None, expected_revision=None) -> str:
        request_id = process_guarded(
            offer_id,
            SubmitRequest(
                offer_id=offer_id,
                requester_id=requester_id,
                quantity=quantity,
                message=message,
                expected_revision=expected_revision,
            ),
            OfferNotAvailable,
        )
        logger.info(
            "Request submitted",
            offer_id=str(offer_id),
            request_id=request_id,
            requester_id=str(requester_id),
            quantity=quantity,
        )
        return request_id

    def approve(self, offer_id, request_id, actor_id, response_message=None, expected_revision=None) -> int:
        revision = process_guarded(
            offer_id,
            ApproveRequest(
                offer_id=offer_id,
                request_id=request_id,
                actor_id=actor_id,
                response_message=response_message,
                expected_revision=expected_revision,
            ),
            OfferNotAvailable,
        )
        logger.info("Request approved", offer_id=str(offer_id), request_id=str(request_id))
        return revision

    def deny(self, offer_id, request_id, actor_id, response_message=None, expected_revision=None) -> int:
        revision = process_guarded(
            offer_id,
            DenyRequest(
                offer_id=offer_id,
                request_id=request_id,
                actor_id=actor_id,
                response_message=response_message,
                expected_revision=expected_revision,
            ),
        )
        logger.info("Request denied", offer_id=str(offer_id), request_id=str(request_id))
        return revision

    def complete(self, offer_id, request_id, actor_id, expected_revision=None) -> int:
        revision = process_guarded(
            offer_id,
            CompleteRequest(
                offer_id=offer_id,
                request_id=request_id,
                actor_id=actor_id,
                expected_revision=expected_revision,
            ),
        )
        logger.info("Exchange completed", offer_id=str(offer_id), request_id=str(request_id))
        return revision

    def cancel(self, offer_id, request_id, actor_id, expected_revision=None) -> int:
        revision = process_guarded(
            offer_id,
            CancelRequest(
                offer_id=offer_id,
                request_id=request_id,
                actor_id=actor_id,
                expected_revision=expected_revision,
            ),
        )
        logger.info("Request cancelled", offer_id=str(offer_id), request_id=str(request_id))
        return revision
