"""Process-local, non-blocking guard around changes to one offer, resource or help request.

Only one change per key is in flight at a time. A second caller does not
wait: it fails immediately. Offers are keyed by their id; publishing is keyed
by the source resource (`resource_key`) so two offers cannot be carved out of
the same stockpile line at once. The guard wraps the whole command,
including its unit-of-work commit.

The busy error is ConcurrentUpdate unless the caller names the error its
loser would have seen anyway (approve and create report OfferNotAvailable).
Version conflicts reported by the persistence layer always surface as
ConcurrentUpdate: they say nothing about the target's status.
"""

import threading
from contextlib import contextmanager

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from preparedness.errors import ConcurrentUpdate

logger = structlog.get_logger(__name__)


def resource_key(resource_id) -> str:
    return f"resource:{resource_id}"


class OfferGuard:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._busy: set[str] = set()

    @contextmanager
    def claim(self, key, busy_error=ConcurrentUpdate):
        key = str(key)
        with self._lock:
            if key in self._busy:
                logger.info("Target busy, rejecting concurrent change", key=key, error=busy_error.__name__)
                raise busy_error()
            self._busy.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._busy.discard(key)

    def in_flight(self) -> list[str]:
        with self._lock:
            return list(self._busy)


offer_guard = OfferGuard()


def process_versioned(command):
    """Process `command`, reporting a lost compare-and-swap as ConcurrentUpdate."""
    try:
        return current_domain.process(command, asynchronous=False)
    except ExpectedVersionError as exc:
        logger.info("Target changed underneath the command", command=type(command).__name__, detail=str(exc))
        raise ConcurrentUpdate() from exc


def process_guarded(key, command, busy_error=ConcurrentUpdate):
    """Process `command` while holding `key`."""
    with offer_guard.claim(key, busy_error):
        return process_versioned(command)
