"""
Property query composition.

Translates SearchCriteria into predicates against the ``properties``
collection, runs the query, and records the search in the history table.
"""

import asyncio
import logging
from typing import List, Optional, Set

from realty_site.error_handling import ErrorHandler
from realty_site.models import (
    PropertyRecord,
    SearchBroadcast,
    SearchCriteria,
    SearchHistoryEntry,
    SearchOutcome,
)
from realty_site.store import Condition, DataStore, Query
from .broadcast import ResultBroadcast
from .suggestions import LOCATION_COLUMNS


logger = logging.getLogger(__name__)


def location_conditions(location_text: str) -> List[Condition]:
    """Contains-conditions for every '-'-separated part of the location text.

    A suggestion label ``"Jardins - São Paulo, SP"`` yields conditions for
    both ``Jardins`` and ``São Paulo, SP`` on each location column; the
    caller ORs them all together.
    """
    return [
        Condition.contains(column, part)
        for part in SearchCriteria(location=location_text).location_parts()
        for column in LOCATION_COLUMNS
    ]


class PropertyQueryComposer:
    """Builds and executes property searches.

    Attributes:
        store: Data store holding ``properties`` and ``property_search``
        broadcast: Channel that receives every completed search, if any
    """

    TABLE = "properties"
    HISTORY_TABLE = "property_search"

    def __init__(
        self,
        store: DataStore,
        broadcast: Optional[ResultBroadcast] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        self.store = store
        self.broadcast = broadcast
        self.error_handler = error_handler or ErrorHandler("search")
        self._pending: Set[asyncio.Task] = set()

    def build_query(self, criteria: SearchCriteria) -> Query:
        """Translate criteria into a Query.

        The location group is ORed internally; every other predicate is
        ANDed with it. Empty criteria produce an unfiltered query.
        """
        query = Query()

        if criteria.location:
            query.or_(*location_conditions(criteria.location))

        if criteria.property_type:
            query.eq("type", criteria.property_type)
        if criteria.status:
            query.eq("status", criteria.status)

        if criteria.bedrooms_min is not None:
            query.gte("bedrooms", criteria.bedrooms_min)
        if criteria.suites_min is not None:
            query.gte("suites", criteria.suites_min)
        if criteria.parking_min is not None:
            query.gte("parking_spots", criteria.parking_min)

        if criteria.price_min is not None:
            query.gte("price", criteria.price_min)
        if criteria.price_max is not None:
            query.lte("price", criteria.price_max)

        return query

    async def search(self, criteria: SearchCriteria) -> SearchOutcome:
        """Run a search.

        On success the history record is scheduled (not awaited) and the
        results are published, even when there are none. A store failure is
        returned in the outcome rather than raised.

        Args:
            criteria: User filter selections

        Returns:
            SearchOutcome with the matching records or the error
        """
        query = self.build_query(criteria)
        logger.info(f"Searching properties with {query.to_params()}")

        try:
            rows = await self.store.select(self.TABLE, query)
            records = [PropertyRecord.from_row(row) for row in rows]
        except Exception as e:
            self.error_handler.log_failure("search", e, args=(criteria,))
            return SearchOutcome(records=[], error=e)

        logger.info(f"Search matched {len(records)} propert{'y' if len(records) == 1 else 'ies'}")

        self.record_history(criteria)

        if self.broadcast is not None:
            self.broadcast.publish(SearchBroadcast(results=records, criteria=criteria))

        return SearchOutcome(records=records)

    def record_history(self, criteria: SearchCriteria) -> Optional[asyncio.Task]:
        """Schedule the history insert without waiting for it.

        Failures are logged at debug level and otherwise ignored.

        Returns:
            The scheduled task, or None when no event loop is running
        """
        entry = SearchHistoryEntry.from_criteria(criteria)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; search history not recorded")
            return None

        task = loop.create_task(
            self.error_handler.fail_open(
                self.store.insert,
                self.HISTORY_TABLE,
                entry.to_row(),
                fallback=None,
                level=logging.DEBUG,
            )
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def wait_for_history(self) -> None:
        """Wait for scheduled history writes, e.g. before shutting down."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
