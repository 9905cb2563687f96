"""CommunityActivity — recent happenings in a community, newest first."""

from enum import Enum

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from preparedness.community.community import Community
from preparedness.community.events import MemberJoined
from preparedness.domain import preparedness
from preparedness.sharing.events import OfferPublished, RequestCompleted
from preparedness.sharing.offer import SharedOffer


class ActivityType(Enum):
    MEMBER_JOINED = "member_joined"
    RESOURCE_SHARED = "resource_shared"
    EXCHANGE_COMPLETED = "exchange_completed"


@preparedness.projection
class CommunityActivity:
    activity_id: Identifier(identifier=True, required=True)
    community_id: Identifier(required=True)
    activity_type: String(choices=ActivityType, required=True)
    title: String(required=True, max_length=255)
    description: Text()
    user_id: Identifier()
    resource_name: String(max_length=200)
    created_at: DateTime()


@preparedness.projector(projector_for=CommunityActivity, aggregates=[Community, SharedOffer])
class CommunityActivityProjector:
    def _record(self, activity_id, **fields):
        repo = current_domain.repository_for(CommunityActivity)
        try:
            repo.get(activity_id)
        except ObjectNotFoundError:
            repo.add(CommunityActivity(activity_id=activity_id, **fields))

    @on(MemberJoined)
    def on_member_joined(self, event):
        self._record(
            f"member_joined:{event.community_id}:{event.member_id}:{event.joined_at.isoformat()}",
            community_id=event.community_id,
            activity_type=ActivityType.MEMBER_JOINED.value,
            title=f"{event.display_name} joined the community",
            user_id=event.member_id,
            created_at=event.joined_at,
        )

    @on(OfferPublished)
    def on_offer_published(self, event):
        self._record(
            f"resource_shared:{event.offer_id}",
            community_id=event.community_id,
            activity_type=ActivityType.RESOURCE_SHARED.value,
            title=f"{event.resource_name} is now shared",
            description=f"{event.offered_quantity:g} {event.resource_unit} offered to the community",
            user_id=event.owner_id,
            resource_name=event.resource_name,
            created_at=event.published_at,
        )

    @on(RequestCompleted)
    def on_request_completed(self, event):
        self._record(
            f"exchange_completed:{event.request_id}",
            community_id=event.community_id,
            activity_type=ActivityType.EXCHANGE_COMPLETED.value,
            title=f"{event.resource_name} changed hands",
            description=f"{event.requested_quantity:g} {event.resource_unit} shared between members",
            user_id=event.requester_id,
            resource_name=event.resource_name,
            created_at=event.completed_at,
        )


def recent_activity(community_id, limit=20) -> list[CommunityActivity]:
    items = (
        current_domain.repository_for(CommunityActivity)._dao.query.filter(community_id=str(community_id)).all().items
    )
    return sorted(items, key=lambda a: a.created_at, reverse=True)[:limit]
