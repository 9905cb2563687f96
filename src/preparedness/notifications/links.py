"""Deep links carried by notifications.

The link depends only on who reads it and on the community, offer and
request involved. Owners land on their shared-resources page, requesters on
the community's resource tab.
"""

from enum import Enum
from urllib.parse import urlencode


class Audience(Enum):
    OWNER = "owner"
    REQUESTER = "requester"


def action_url(audience: Audience, community_id: str, offer_id: str, request_id: str) -> str:
    if audience == Audience.OWNER:
        query = {"community": community_id, "offer": offer_id, "request": request_id}
        return f"/local/resources/shared?{urlencode(query)}"

    query = {"tab": "resources", "community": community_id, "resource": offer_id, "request": request_id}
    return f"/local?{urlencode(query)}"
