"""Resource aggregate — one line of a member's private stockpile.

Quantities are non-negative floats measured in `unit`. A shelf life of
UNLIMITED_SHELF_LIFE days marks goods that never expire (tools, machinery).
Only the owner may change a resource; the one exception is `hand_off`, which
the request coordinator applies when an exchange completes.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from preparedness.domain import preparedness
from preparedness.errors import InsufficientQuantity, NotOwner
from preparedness.inventory.events import ResourceAdded, ResourceEarmarked, ResourceHandedOff, ResourceUpdated

UNLIMITED_SHELF_LIFE = 99999


class ResourceCategory(Enum):
    FOOD = "food"
    WATER = "water"
    MEDICINE = "medicine"
    ENERGY = "energy"
    TOOLS = "tools"
    MACHINERY = "machinery"
    OTHER = "other"


@preparedness.aggregate
class Resource:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    category = String(required=True, choices=ResourceCategory)
    quantity = Float(required=True, min_value=0.0)
    unit = String(required=True, max_length=30)
    shelf_life_days = Integer(min_value=1, default=UNLIMITED_SHELF_LIFE)
    is_recommended = Boolean(default=False)
    notes = Text()
    added_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def add(
        cls,
        owner_id,
        name,
        category,
        quantity,
        unit,
        shelf_life_days=None,
        is_recommended=False,
        notes=None,
    ):
        """Add a resource to the owner's stockpile."""
        now = datetime.now(UTC)
        resource = cls(
            owner_id=owner_id,
            name=name,
            category=category,
            quantity=quantity,
            unit=unit,
            shelf_life_days=shelf_life_days or UNLIMITED_SHELF_LIFE,
            is_recommended=bool(is_recommended),
            notes=notes,
            added_at=now,
            updated_at=now,
        )
        resource.raise_(
            ResourceAdded(
                resource_id=str(resource.id),
                owner_id=str(owner_id),
                name=name,
                category=resource.category,
                quantity=resource.quantity,
                unit=unit,
                shelf_life_days=resource.shelf_life_days,
                added_at=now,
            )
        )
        return resource

    def assert_owner(self, actor_id) -> None:
        if str(self.owner_id) != str(actor_id):
            raise NotOwner("Only the owner can change this resource")

    @property
    def has_unlimited_shelf_life(self) -> bool:
        return self.shelf_life_days is None or self.shelf_life_days >= UNLIMITED_SHELF_LIFE

    def expires_on(self):
        if self.has_unlimited_shelf_life or self.added_at is None:
            return None
        return self.added_at + timedelta(days=self.shelf_life_days)

    def days_remaining(self, now=None):
        """Whole days left before the resource expires, or None if it never does."""
        expires_on = self.expires_on()
        if expires_on is None:
            return None
        if expires_on.tzinfo is None:
            expires_on = expires_on.replace(tzinfo=UTC)
        now = now or datetime.now(UTC)
        return (expires_on - now).days

    def update_details(
        self,
        name=None,
        category=None,
        quantity=None,
        unit=None,
        shelf_life_days=None,
        is_recommended=None,
        notes=None,
    ):
        """Update the resource. Published offers keep their own snapshot."""
        if quantity is not None and quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

        if name is not None:
            self.name = name
        if category is not None:
            self.category = category
        if quantity is not None:
            self.quantity = quantity
        if unit is not None:
            self.unit = unit
        if shelf_life_days is not None:
            self.shelf_life_days = shelf_life_days
        if is_recommended is not None:
            self.is_recommended = is_recommended
        if notes is not None:
            self.notes = notes

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ResourceUpdated(
                resource_id=str(self.id),
                owner_id=str(self.owner_id),
                name=self.name,
                quantity=self.quantity,
                updated_at=self.updated_at,
            )
        )

    def hand_off(self, quantity):
        """Take `quantity` out of the stockpile for a completed exchange."""
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if quantity > self.quantity:
            raise InsufficientQuantity(
                f"Only {self.quantity:g} {self.unit} of {self.name} left, cannot hand off {quantity:g}"
            )

        previous = self.quantity
        self.quantity = previous - quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ResourceHandedOff(
                resource_id=str(self.id),
                owner_id=str(self.owner_id),
                quantity=quantity,
                previous_quantity=previous,
                new_quantity=self.quantity,
                handed_off_at=self.updated_at,
            )
        )

    def earmark(self, offer_id, quantity, already_committed=0.0):
        """Promise `quantity` to an offer on top of what other offers already hold.

        The stockpile itself does not shrink until an exchange completes. The
        event makes the resource part of the caller's unit of work, so two
        offers carved out of the same line concurrently cannot both commit.
        """
        available = self.quantity - already_committed
        if quantity > available:
            raise InsufficientQuantity(f"Only {max(available, 0):g} {self.unit} of {self.name} can still be offered")

        self.raise_(
            ResourceEarmarked(
                resource_id=str(self.id),
                owner_id=str(self.owner_id),
                offer_id=str(offer_id),
                quantity=quantity,
                committed_quantity=already_committed + quantity,
                earmarked_at=datetime.now(UTC),
            )
        )
