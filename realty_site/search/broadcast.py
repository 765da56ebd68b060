"""
Publish/subscribe channel for completed searches.

The search form publishes every finished search here and any number of
listing displays subscribe to it, so the form never needs to know which
displays exist.
"""

import logging
from typing import Callable, List, Tuple

from realty_site.models import SearchBroadcast


logger = logging.getLogger(__name__)

Subscriber = Callable[[SearchBroadcast], None]


class ResultBroadcast:
    """Synchronous, unbuffered fan-out of search results.

    Delivery happens inside ``publish`` in registration order. A publish with
    no subscribers is dropped; late subscribers never see earlier payloads.
    """

    def __init__(self):
        self._subscribers: List[Tuple[object, Subscriber]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback.

        Args:
            callback: Called with each SearchBroadcast

        Returns:
            A function that removes exactly this registration
        """
        token = object()
        self._subscribers.append((token, callback))

        def unsubscribe() -> None:
            self._subscribers = [(t, cb) for t, cb in self._subscribers if t is not token]

        return unsubscribe

    def publish(self, broadcast: SearchBroadcast) -> int:
        """Deliver a payload to the current subscribers.

        A subscriber that raises is logged and skipped; the rest still
        receive the payload.

        Returns:
            Number of subscribers the payload was delivered to
        """
        delivered = 0
        # Snapshot so callbacks may unsubscribe while we iterate
        for _, callback in list(self._subscribers):
            try:
                callback(broadcast)
                delivered += 1
            except Exception as e:
                logger.error(f"Search subscriber {callback!r} failed: {e}")
        logger.debug(f"Broadcast {len(broadcast.results)} result(s) to {delivered} subscriber(s)")
        return delivered
