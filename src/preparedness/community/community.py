"""Community aggregate — the visibility boundary for shared resources.

Only members see a community's offers and may request them. Memberships also
carry the display name that notifications use as the sender.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String, Text

from preparedness.community.events import CommunityCreated, MemberJoined, MemberLeft
from preparedness.domain import preparedness


class MemberRole(Enum):
    ADMIN = "admin"
    MEMBER = "member"


@preparedness.entity(part_of="Community")
class Membership:
    member_id = Identifier(required=True)
    display_name = String(required=True, max_length=100)
    role = String(choices=MemberRole, default=MemberRole.MEMBER.value)
    joined_at = DateTime()


@preparedness.aggregate
class Community:
    name = String(required=True, max_length=150)
    description = Text()
    created_by = Identifier(required=True)
    members = HasMany(Membership)
    created_at = DateTime()

    @classmethod
    def create(cls, name, created_by, display_name, description=None):
        """Found a community with its creator as the first admin."""
        now = datetime.now(UTC)
        community = cls(
            name=name,
            description=description,
            created_by=created_by,
            created_at=now,
        )
        community.raise_(
            CommunityCreated(
                community_id=str(community.id),
                name=name,
                created_by=str(created_by),
                created_at=now,
            )
        )
        community.join(created_by, display_name, role=MemberRole.ADMIN.value)
        return community

    def membership_of(self, member_id):
        return next(
            (m for m in (self.members or []) if str(m.member_id) == str(member_id)),
            None,
        )

    def is_member(self, member_id) -> bool:
        return self.membership_of(member_id) is not None

    def display_name_of(self, member_id):
        membership = self.membership_of(member_id)
        return membership.display_name if membership else None

    def join(self, member_id, display_name, role=MemberRole.MEMBER.value):
        if self.is_member(member_id):
            raise ValidationError({"member_id": ["Already a member of this community"]})

        now = datetime.now(UTC)
        self.add_members(
            Membership(
                member_id=member_id,
                display_name=display_name,
                role=role,
                joined_at=now,
            )
        )
        self.raise_(
            MemberJoined(
                community_id=str(self.id),
                member_id=str(member_id),
                display_name=display_name,
                role=role,
                joined_at=now,
            )
        )

    def leave(self, member_id):
        membership = self.membership_of(member_id)
        if membership is None:
            raise ValidationError({"member_id": ["Not a member of this community"]})

        self.remove_members(membership)
        self.raise_(
            MemberLeft(
                community_id=str(self.id),
                member_id=str(member_id),
                left_at=datetime.now(UTC),
            )
        )
