"""Preparedness bounded context — personal stockpiles and community sharing.

Tracks household resource stockpiles, publishes surplus quantities to
communities as shared offers, coordinates requests against those offers and
notifies the members affected by every request transition.
"""

import structlog
from protean.domain import Domain

preparedness = Domain(name="preparedness")

logger = structlog.get_logger(__name__)
