"""Help requests — commands and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from preparedness.community.community import Community
from preparedness.domain import preparedness
from preparedness.errors import NotCommunityMember
from preparedness.sharing.help_request import HelpCategory, HelpRequest, HelpStatus, Urgency


@preparedness.command(part_of="HelpRequest")
class PostHelpRequest:
    requester_id = Identifier(required=True)
    community_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    description = Text(required=True)
    category = String(choices=HelpCategory, default=HelpCategory.OTHER.value)
    urgency = String(choices=Urgency, default=Urgency.MEDIUM.value)
    location = String(max_length=255)


@preparedness.command(part_of="HelpRequest")
class ChangeHelpRequestStatus:
    help_request_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    status = String(required=True, choices=HelpStatus)


@preparedness.command(part_of="HelpRequest")
class DeleteHelpRequest:
    help_request_id = Identifier(required=True)
    actor_id = Identifier(required=True)


@preparedness.command_handler(part_of=HelpRequest)
class HelpRequestHandler:
    @handle(PostHelpRequest)
    def post_help_request(self, command):
        community = current_domain.repository_for(Community).get(command.community_id)
        if not community.is_member(command.requester_id):
            raise NotCommunityMember()

        help_request = HelpRequest.post(
            requester_id=command.requester_id,
            community_id=command.community_id,
            title=command.title,
            description=command.description,
            category=command.category,
            urgency=command.urgency,
            location=command.location,
        )
        current_domain.repository_for(HelpRequest).add(help_request)
        return str(help_request.id)

    @handle(ChangeHelpRequestStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(HelpRequest)
        help_request = repo.get(command.help_request_id)
        help_request.assert_requester(command.actor_id)
        help_request.change_status(command.status)
        repo.add(help_request)
        return help_request.status

    @handle(DeleteHelpRequest)
    def delete_help_request(self, command):
        repo = current_domain.repository_for(HelpRequest)
        help_request = repo.get(command.help_request_id)
        help_request.assert_requester(command.actor_id)
        repo._dao.delete(help_request)
