"""SharingRegistry — publishes, revises, withdraws and lists offers."""

import structlog
from protean.utils.globals import current_domain

from preparedness.community.community import Community
from preparedness.errors import NotCommunityMember
from preparedness.sharing.guard import process_guarded, resource_key
from preparedness.sharing.offer import OfferStatus, SharedOffer
from preparedness.sharing.publishing import PublishOffer, ReviseOffer, WithdrawOffer

logger = structlog.get_logger(__name__)


class SharingRegistry:
    def publish(
        self,
        actor_id,
        resource_id,
        community_id,
        quantity,
        available_until=None,
        location=None,
        notes=None,
    ) -> str:
        offer_id = process_guarded(
            resource_key(resource_id),
            PublishOffer(
                actor_id=actor_id,
                resource_id=resource_id,
                community_id=community_id,
                quantity=quantity,
                available_until=available_until,
                location=location,
                notes=notes,
            ),
        )
        logger.info(
            "Offer published",
            offer_id=offer_id,
            resource_id=str(resource_id),
            community_id=str(community_id),
            quantity=quantity,
        )
        return offer_id

    def revise(self, offer_id, actor_id, expected_revision=None, **updates) -> int:
        revision = process_guarded(
            offer_id,
            ReviseOffer(offer_id=offer_id, actor_id=actor_id, expected_revision=expected_revision, **updates),
        )
        logger.info("Offer revised", offer_id=str(offer_id), revision=revision)
        return revision

    def withdraw(self, offer_id, actor_id, expected_revision=None) -> None:
        process_guarded(
            offer_id,
            WithdrawOffer(offer_id=offer_id, actor_id=actor_id, expected_revision=expected_revision),
        )
        logger.info("Offer withdrawn", offer_id=str(offer_id))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get(self, offer_id) -> SharedOffer:
        return current_domain.repository_for(SharedOffer).get(offer_id)

    def community_offers(self, community_id, viewer_id=None) -> list[SharedOffer]:
        """Offers still open in a community, newest first.

        When `viewer_id` is given, the viewer must belong to the community.
        """
        if viewer_id is not None:
            community = current_domain.repository_for(Community).get(community_id)
            if not community.is_member(viewer_id):
                raise NotCommunityMember()

        offers = (
            current_domain.repository_for(SharedOffer)._dao.query.filter(community_id=str(community_id)).all().items
        )
        visible = [o for o in offers if o.status != OfferStatus.TAKEN.value]
        return sorted(visible, key=lambda o: o.created_at, reverse=True)

    def offers_by_owner(self, owner_id) -> list[SharedOffer]:
        offers = current_domain.repository_for(SharedOffer)._dao.query.filter(owner_id=str(owner_id)).all().items
        return sorted(offers, key=lambda o: o.created_at, reverse=True)
