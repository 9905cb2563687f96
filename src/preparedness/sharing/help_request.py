"""HelpRequest aggregate — a member asking their community for something.

The counterpart of a SharedOffer: instead of offering surplus, a member
describes what they are missing and how urgent it is. Urgency maps to a
numeric priority that orders the community board.

State Machine:
    OPEN ⇄ IN_PROGRESS
    {OPEN, IN_PROGRESS} → RESOLVED → CLOSED
    {OPEN, IN_PROGRESS} → CLOSED

Only the requester changes or deletes their own help request.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from preparedness.domain import preparedness
from preparedness.errors import HelpRequestSettled, NotRequester
from preparedness.sharing.events import HelpRequested, HelpRequestStatusChanged


class HelpCategory(Enum):
    FOOD = "food"
    WATER = "water"
    MEDICINE = "medicine"
    ENERGY = "energy"
    TOOLS = "tools"
    SHELTER = "shelter"
    TRANSPORT = "transport"
    SKILLS = "skills"
    OTHER = "other"


class Urgency(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class HelpStatus(Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


PRIORITY_BY_URGENCY = {
    Urgency.LOW: 1,
    Urgency.MEDIUM: 2,
    Urgency.HIGH: 3,
    Urgency.CRITICAL: 4,
}

_HELP_TRANSITIONS = {
    HelpStatus.OPEN: {HelpStatus.IN_PROGRESS, HelpStatus.RESOLVED, HelpStatus.CLOSED},
    HelpStatus.IN_PROGRESS: {HelpStatus.OPEN, HelpStatus.RESOLVED, HelpStatus.CLOSED},
    HelpStatus.RESOLVED: {HelpStatus.CLOSED},
    HelpStatus.CLOSED: set(),  # terminal
}

UNSETTLED_HELP_STATUSES = {HelpStatus.OPEN.value, HelpStatus.IN_PROGRESS.value}


@preparedness.aggregate
class HelpRequest:
    requester_id = Identifier(required=True)
    community_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(choices=HelpCategory, default=HelpCategory.OTHER.value)
    urgency = String(choices=Urgency, default=Urgency.MEDIUM.value)
    priority = Integer(default=2)
    location = String(max_length=255)
    status = String(choices=HelpStatus, default=HelpStatus.OPEN.value)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def post(cls, requester_id, community_id, title, description, category, urgency, location=None):
        if not title or not title.strip():
            raise ValidationError({"title": ["Title cannot be blank"]})

        now = datetime.now(UTC)
        help_request = cls(
            requester_id=requester_id,
            community_id=community_id,
            title=title.strip(),
            description=description,
            category=category,
            urgency=urgency,
            priority=PRIORITY_BY_URGENCY[Urgency(urgency)],
            location=location,
            status=HelpStatus.OPEN.value,
            created_at=now,
            updated_at=now,
        )
        help_request.raise_(
            HelpRequested(
                help_request_id=str(help_request.id),
                requester_id=str(requester_id),
                community_id=str(community_id),
                title=help_request.title,
                category=help_request.category,
                urgency=help_request.urgency,
                priority=help_request.priority,
                requested_at=now,
            )
        )
        return help_request

    def assert_requester(self, actor_id) -> None:
        if str(self.requester_id) != str(actor_id):
            raise NotRequester("Only the member who asked for help can do this")

    @property
    def is_unsettled(self) -> bool:
        return self.status in UNSETTLED_HELP_STATUSES

    def change_status(self, status) -> None:
        current = HelpStatus(self.status)
        target = HelpStatus(status)
        if target == current:
            return
        if target not in _HELP_TRANSITIONS[current]:
            raise HelpRequestSettled(f"Help request cannot move from {current.value} to {target.value}")

        self.status = target.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            HelpRequestStatusChanged(
                help_request_id=str(self.id),
                requester_id=str(self.requester_id),
                community_id=str(self.community_id),
                previous_status=current.value,
                status=target.value,
                changed_at=self.updated_at,
            )
        )
