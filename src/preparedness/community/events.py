"""Domain events for the Community aggregate."""

from protean.fields import DateTime, Identifier, String

from preparedness.domain import preparedness


@preparedness.event(part_of="Community")
class CommunityCreated:
    """A new community was founded; its creator is its first admin."""

    __version__ = "v1"

    community_id = Identifier(required=True)
    name = String(required=True)
    created_by = Identifier(required=True)
    created_at = DateTime(required=True)


@preparedness.event(part_of="Community")
class MemberJoined:
    __version__ = "v1"

    community_id = Identifier(required=True)
    member_id = Identifier(required=True)
    display_name = String(required=True)
    role = String(required=True)
    joined_at = DateTime(required=True)


@preparedness.event(part_of="Community")
class MemberLeft:
    __version__ = "v1"

    community_id = Identifier(required=True)
    member_id = Identifier(required=True)
    left_at = DateTime(required=True)
