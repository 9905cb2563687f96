"""StatusProjector — read-only preparedness figures.

Everything here is recomputed from the repositories on each call and never
stored, so it cannot drift from the aggregates it summarises.
"""

from datetime import UTC, datetime

from protean.utils.globals import current_domain

from preparedness.inventory.resource import Resource
from preparedness.settings import custom_setting
from preparedness.sharing.offer import OfferStatus, RequestStatus, SharedOffer


class StatusProjector:
    def _resources_of(self, user_id):
        return current_domain.repository_for(Resource)._dao.query.filter(owner_id=str(user_id)).all().items

    def _offers_of(self, user_id):
        return current_domain.repository_for(SharedOffer)._dao.query.filter(owner_id=str(user_id)).all().items

    def pending_request_count(self, offer_id) -> int:
        offer = current_domain.repository_for(SharedOffer).get(offer_id)
        return len(offer.requests_in(RequestStatus.PENDING))

    def _covered_categories(self, resources) -> set[str]:
        return {r.category for r in resources if r.quantity > 0}

    def fulfillment_percent(self, user_id) -> int:
        """Share of the recommended categories the user holds at least some of."""
        checklist = custom_setting("recommended_categories")
        if not checklist:
            return 0
        covered = self._covered_categories(self._resources_of(user_id))
        return round(100 * len([c for c in checklist if c in covered]) / len(checklist))

    def shared_summary(self, user_id) -> dict:
        counts = {status.value: 0 for status in OfferStatus}
        for offer in self._offers_of(user_id):
            counts[offer.status] = counts.get(offer.status, 0) + 1
        counts["total"] = sum(counts.values())
        return counts

    def preparedness_summary(self, user_id, now=None) -> dict:
        now = now or datetime.now(UTC)
        window = custom_setting("expiring_soon_days")
        resources = self._resources_of(user_id)

        filled = [r for r in resources if r.quantity > 0]
        recommended = [r for r in resources if r.is_recommended]
        expiring_soon = [
            r for r in filled if (days := r.days_remaining(now)) is not None and days <= window
        ]
        return {
            "total_resources": len(resources),
            "filled_resources": len(filled),
            "recommended_total": len(recommended),
            "recommended_filled": len([r for r in recommended if r.quantity > 0]),
            "expiring_soon": len(expiring_soon),
            "fulfillment_percent": self.fulfillment_percent(user_id),
        }
