"""Domain events for the Resource aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from preparedness.domain import preparedness


@preparedness.event(part_of="Resource")
class ResourceAdded:
    """A resource entered a member's private stockpile."""

    __version__ = "v1"

    resource_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)
    category = String(required=True)
    quantity = Float(required=True)
    unit = String(required=True)
    shelf_life_days = Integer(required=True)
    added_at = DateTime(required=True)


@preparedness.event(part_of="Resource")
class ResourceUpdated:
    __version__ = "v1"

    resource_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)
    quantity = Float(required=True)
    updated_at = DateTime(required=True)


@preparedness.event(part_of="Resource")
class ResourceHandedOff:
    """Part of the resource left the stockpile through a completed exchange."""

    __version__ = "v1"

    resource_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    quantity = Float(required=True)
    previous_quantity = Float(required=True)
    new_quantity = Float(required=True)
    handed_off_at = DateTime(required=True)



@preparedness.event(part_of="Resource")
class ResourceEarmarked:
    """Part of the resource was promised to a community offer."""

    __version__ = "v1"

    resource_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    offer_id = Identifier(required=True)
    quantity = Float(required=True)
    committed_quantity = Float(required=True)
    earmarked_at = DateTime(required=True)
