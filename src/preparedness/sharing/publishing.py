"""Offer publishing — commands and handler."""

from protean import handle
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from preparedness.community.community import Community
from preparedness.domain import preparedness
from preparedness.errors import NotCommunityMember
from preparedness.inventory.resource import Resource
from preparedness.sharing.offer import SharedOffer


@preparedness.command(part_of="SharedOffer")
class PublishOffer:
    """Offer part of a resource to a community."""

    actor_id = Identifier(required=True)
    resource_id = Identifier(required=True)
    community_id = Identifier(required=True)
    quantity = Float(required=True)
    available_until = DateTime()
    location = String(max_length=255)
    notes = Text()


@preparedness.command(part_of="SharedOffer")
class ReviseOffer:
    offer_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    quantity = Float()
    available_until = DateTime()
    location = String(max_length=255)
    notes = Text()
    expected_revision = Integer()


@preparedness.command(part_of="SharedOffer")
class WithdrawOffer:
    offer_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    expected_revision = Integer()


def committed_quantity(resource_id, exclude_offer_id=None):
    """Quantity of a resource already promised in active offers."""
    offers = (
        current_domain.repository_for(SharedOffer)._dao.query.filter(source_resource_id=str(resource_id)).all().items
    )
    return sum(
        o.offered_quantity for o in offers if o.is_active and (exclude_offer_id is None or str(o.id) != str(exclude_offer_id))
    )


@preparedness.command_handler(part_of=SharedOffer)
class PublishingHandler:
    @handle(PublishOffer)
    def publish_offer(self, command):
        resource_repo = current_domain.repository_for(Resource)
        resource = resource_repo.get(command.resource_id)
        resource.assert_owner(command.actor_id)

        community = current_domain.repository_for(Community).get(command.community_id)
        if not community.is_member(command.actor_id):
            raise NotCommunityMember()

        offer = SharedOffer.publish(
            resource=resource,
            community_id=command.community_id,
            quantity=command.quantity,
            available_until=command.available_until,
            location=command.location,
            notes=command.notes,
        )
        resource.earmark(offer.id, command.quantity, committed_quantity(resource.id))

        resource_repo.add(resource)
        current_domain.repository_for(SharedOffer).add(offer)
        return str(offer.id)

    @handle(ReviseOffer)
    def revise_offer(self, command):
        repo = current_domain.repository_for(SharedOffer)
        offer = repo.get(command.offer_id)
        offer.assert_owner(command.actor_id)
        offer.check_revision(command.expected_revision)

        offer.revise(
            quantity=command.quantity,
            available_until=command.available_until,
            location=command.location,
            notes=command.notes,
        )
        if command.quantity is not None:
            resource_repo = current_domain.repository_for(Resource)
            resource = resource_repo.get(offer.source_resource_id)
            resource.earmark(offer.id, command.quantity, committed_quantity(resource.id, exclude_offer_id=offer.id))
            resource_repo.add(resource)

        repo.add(offer)
        return offer.revision

    @handle(WithdrawOffer)
    def withdraw_offer(self, command):
        repo = current_domain.repository_for(SharedOffer)
        offer = repo.get(command.offer_id)
        offer.assert_owner(command.actor_id)
        offer.check_revision(command.expected_revision)
        offer.assert_withdrawable()

        repo._dao.delete(offer)
