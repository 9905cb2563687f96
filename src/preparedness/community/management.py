"""Community management — commands and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from preparedness.community.community import Community
from preparedness.domain import preparedness


@preparedness.command(part_of="Community")
class CreateCommunity:
    name = String(required=True, max_length=150)
    description = Text()
    created_by = Identifier(required=True)
    display_name = String(required=True, max_length=100)


@preparedness.command(part_of="Community")
class JoinCommunity:
    community_id = Identifier(required=True)
    member_id = Identifier(required=True)
    display_name = String(required=True, max_length=100)


@preparedness.command(part_of="Community")
class LeaveCommunity:
    community_id = Identifier(required=True)
    member_id = Identifier(required=True)


@preparedness.command_handler(part_of=Community)
class CommunityManagementHandler:
    @handle(CreateCommunity)
    def create_community(self, command):
        community = Community.create(
            name=command.name,
            created_by=command.created_by,
            display_name=command.display_name,
            description=command.description,
        )
        current_domain.repository_for(Community).add(community)
        return str(community.id)

    @handle(JoinCommunity)
    def join_community(self, command):
        repo = current_domain.repository_for(Community)
        community = repo.get(command.community_id)
        community.join(command.member_id, command.display_name)
        repo.add(community)

    @handle(LeaveCommunity)
    def leave_community(self, command):
        repo = current_domain.repository_for(Community)
        community = repo.get(command.community_id)
        community.leave(command.member_id)
        repo.add(community)
