"""Stockpile management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from preparedness.domain import preparedness
from preparedness.errors import OfferHasActiveRequest
from preparedness.inventory.resource import Resource
from preparedness.sharing.offer import SharedOffer

logger = structlog.get_logger(__name__)


@preparedness.command(part_of="Resource")
class AddResource:
    """Add a resource to a member's stockpile."""

    owner_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    category = String(required=True, max_length=30)
    quantity = Float(required=True)
    unit = String(required=True, max_length=30)
    shelf_life_days = Integer()
    is_recommended = Boolean(default=False)
    notes = Text()


@preparedness.command(part_of="Resource")
class UpdateResource:
    resource_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    name = String(max_length=200)
    category = String(max_length=30)
    quantity = Float()
    unit = String(max_length=30)
    shelf_life_days = Integer()
    is_recommended = Boolean()
    notes = Text()


@preparedness.command(part_of="Resource")
class RemoveResource:
    resource_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@preparedness.command_handler(part_of=Resource)
class ResourceManagementHandler:
    @handle(AddResource)
    def add_resource(self, command):
        resource = Resource.add(
            owner_id=command.owner_id,
            name=command.name,
            category=command.category,
            quantity=command.quantity,
            unit=command.unit,
            shelf_life_days=command.shelf_life_days,
            is_recommended=command.is_recommended,
            notes=command.notes,
        )
        current_domain.repository_for(Resource).add(resource)
        return str(resource.id)

    @handle(UpdateResource)
    def update_resource(self, command):
        repo = current_domain.repository_for(Resource)
        resource = repo.get(command.resource_id)
        resource.assert_owner(command.actor_id)
        resource.update_details(
            name=command.name,
            category=command.category,
            quantity=command.quantity,
            unit=command.unit,
            shelf_life_days=command.shelf_life_days,
            is_recommended=command.is_recommended,
            notes=command.notes,
        )
        repo.add(resource)

    @handle(RemoveResource)
    def remove_resource(self, command):
        repo = current_domain.repository_for(Resource)
        resource = repo.get(command.resource_id)
        resource.assert_owner(command.actor_id)

        offers = (
            current_domain.repository_for(SharedOffer)
            ._dao.query.filter(source_resource_id=str(command.resource_id))
            .all()
            .items
        )
        active = [str(o.id) for o in offers if o.is_active]
        if active:
            raise OfferHasActiveRequest(f"Resource is still offered in {len(active)} active offer(s)")

        repo._dao.delete(resource)
        logger.info("Resource removed", resource_id=str(command.resource_id), owner_id=str(command.actor_id))
