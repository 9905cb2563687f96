"""HelpBoard — posts help requests and lists them per community or member."""

import structlog
from protean.utils.globals import current_domain

from preparedness.community.community import Community
from preparedness.errors import NotCommunityMember
from preparedness.sharing.asking import ChangeHelpRequestStatus, DeleteHelpRequest, PostHelpRequest
from preparedness.sharing.guard import process_guarded, process_versioned
from preparedness.sharing.help_request import HelpRequest

logger = structlog.get_logger(__name__)


class HelpBoard:
    def post(
        self,
        requester_id,
        community_id,
        title,
        description,
        category="other",
        urgency="medium",
        location=None,
    ) -> str:
        help_request_id = process_versioned(
            PostHelpRequest(
                requester_id=requester_id,
                community_id=community_id,
                title=title,
                description=description,
                category=category,
                urgency=urgency,
                location=location,
            )
        )
        logger.info(
            "Help requested",
            help_request_id=help_request_id,
            community_id=str(community_id),
            requester_id=str(requester_id),
            urgency=urgency,
        )
        return help_request_id

    def change_status(self, help_request_id, actor_id, status) -> str:
        new_status = process_guarded(
            help_request_id,
            ChangeHelpRequestStatus(help_request_id=help_request_id, actor_id=actor_id, status=status),
        )
        logger.info("Help request status changed", help_request_id=str(help_request_id), status=new_status)
        return new_status

    def delete(self, help_request_id, actor_id) -> None:
        process_guarded(help_request_id, DeleteHelpRequest(help_request_id=help_request_id, actor_id=actor_id))
        logger.info("Help request deleted", help_request_id=str(help_request_id))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get(self, help_request_id) -> HelpRequest:
        return current_domain.repository_for(HelpRequest).get(help_request_id)

    def community_requests(self, community_id, viewer_id=None) -> list[HelpRequest]:
        """Open and in-progress help requests, most urgent first, then newest."""
        if viewer_id is not None:
            community = current_domain.repository_for(Community).get(community_id)
            if not community.is_member(viewer_id):
                raise NotCommunityMember()

        requests = (
            current_domain.repository_for(HelpRequest)._dao.query.filter(community_id=str(community_id)).all().items
        )
        unsettled = [r for r in requests if r.is_unsettled]
        return sorted(unsettled, key=lambda r: (r.priority, r.created_at), reverse=True)

    def requests_of(self, requester_id) -> list[HelpRequest]:
        requests = (
            current_domain.repository_for(HelpRequest)._dao.query.filter(requester_id=str(requester_id)).all().items
        )
        return sorted(requests, key=lambda r: r.created_at, reverse=True)
