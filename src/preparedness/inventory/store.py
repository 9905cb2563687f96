"""InventoryStore — a member's private stockpile."""

import structlog
from protean.utils.globals import current_domain

from preparedness.inventory.management import AddResource, RemoveResource, UpdateResource
from preparedness.inventory.resource import Resource
from preparedness.sharing.guard import process_versioned

logger = structlog.get_logger(__name__)


class InventoryStore:
    def add_resource(
        self,
        owner_id,
        name,
        category,
        quantity,
        unit,
        shelf_life_days=None,
        is_recommended=False,
        notes=None,
    ) -> str:
        resource_id = current_domain.process(
            AddResource(
                owner_id=owner_id,
                name=name,
                category=category,
                quantity=quantity,
                unit=unit,
                shelf_life_days=shelf_life_days,
                is_recommended=is_recommended,
                notes=notes,
            ),
            asynchronous=False,
        )
        logger.info("Resource added", resource_id=resource_id, owner_id=str(owner_id), category=category)
        return resource_id

    def update_resource(self, resource_id, actor_id, **updates) -> None:
        # A concurrent hand-off or earmark may commit first
        process_versioned(UpdateResource(resource_id=resource_id, actor_id=actor_id, **updates))

    def remove_resource(self, resource_id, actor_id) -> None:
        process_versioned(RemoveResource(resource_id=resource_id, actor_id=actor_id))

    def get(self, resource_id) -> Resource:
        return current_domain.repository_for(Resource).get(resource_id)

    def resources_of(self, owner_id) -> list[Resource]:
        resources = current_domain.repository_for(Resource)._dao.query.filter(owner_id=str(owner_id)).all().items
        return sorted(resources, key=lambda r: r.added_at, reverse=True)
