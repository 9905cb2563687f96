"""Request coordination — commands and handler.

Every command names the offer as well as the request: requests live inside
the SharedOffer aggregate and are loaded and saved with it.
"""

from protean import handle
from protean.fields import Float, Identifier, Integer, Text
from protean.utils.globals import current_domain

from preparedness.community.community import Community
from preparedness.domain import preparedness
from preparedness.inventory.resource import Resource
from preparedness.sharing.offer import SharedOffer


@preparedness.command(part_of="SharedOffer")
class SubmitRequest:
    offer_id = Identifier(required=True)
    requester_id = Identifier(required=True)
    quantity = Float(required=True)
    message = Text()
    expected_revision = Integer()


@preparedness.command(part_of="SharedOffer")
class ApproveRequest:
    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    response_message = Text()
    expected_revision = Integer()


@preparedness.command(part_of="SharedOffer")
class DenyRequest:
    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    response_message = Text()
    expected_revision = Integer()


@preparedness.command(part_of="SharedOffer")
class CompleteRequest:
    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    expected_revision = Integer()


@preparedness.command(part_of="SharedOffer")
class CancelRequest:
    offer_id = Identifier(required=True)
    request_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    expected_revision = Integer()


@preparedness.command_handler(part_of=SharedOffer)
class RequestCoordinationHandler:
    @handle(SubmitRequest)
    def submit_request(self, command):
        repo = current_domain.repository_for(SharedOffer)
        offer = repo.get(command.offer_id)
        offer.check_revision(command.expected_revision)

        community = current_domain.repository_for(Community).get(offer.community_id)
        request = offer.submit_request(
            requester_id=command.requester_id,
            quantity=command.quantity,
            message=command.message,
            requester_is_member=community.is_member(command.requester_id),
        )
        repo.add(offer)
        return str(request.id)

    @handle(ApproveRequest)
    def approve_request(self, command):
        repo = current_domain.repository_for(SharedOffer)
        offer = repo.get(command.offer_id)
        offer.check_revision(command.expected_revision)
        offer.approve(command.request_id, command.actor_id, command.response_message)
        repo.add(offer)
        return offer.revision

    @handle(DenyRequest)
    def deny_request(self, command):
        repo = current_domain.repository_for(SharedOffer)
        offer = repo.get(command.offer_id)
        offer.check_revision(command.expected_revision)
        offer.deny(command.request_id, command.actor_id, command.response_message)
        repo.add(offer)
        return offer.revision

    @handle(CompleteRequest)
    def complete_request(self, command):
        repo = current_domain.repository_for(SharedOffer)
        offer = repo.get(command.offer_id)
        offer.check_revision(command.expected_revision)
        request = offer.complete(command.request_id, command.actor_id)

        # Both saves belong to this handler's unit of work
        resource_repo = current_domain.repository_for(Resource)
        resource = resource_repo.get(offer.source_resource_id)
        resource.hand_off(request.requested_quantity)

        resource_repo.add(resource)
        repo.add(offer)
        return offer.revision

    @handle(CancelRequest)
    def cancel_request(self, command):
        repo = current_domain.repository_for(SharedOffer)
        offer = repo.get(command.offer_id)
        offer.check_revision(command.expected_revision)
        offer.cancel(command.request_id, command.actor_id)
        repo.add(offer)
        return offer.revision
