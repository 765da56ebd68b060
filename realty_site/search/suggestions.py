"""
Location suggestions for the search box.

Looks up pre-aggregated per-location property counts and turns them into
labelled suggestions, preferring exact matches over partial ones.
"""

import logging
from typing import Dict, List, Optional

from realty_site.error_handling import ErrorHandler
from realty_site.models import LocationStat, LocationSuggestion
from realty_site.store import Condition, DataStore, Query


logger = logging.getLogger(__name__)

LOCATION_COLUMNS = ("location", "city", "region")


class LocationSuggestionResolver:
    """Resolves partial location text into ranked suggestions.

    Attributes:
        store: Data store holding the ``location_stats`` view
        min_chars: Shortest input that triggers a lookup
    """

    TABLE = "location_stats"

    def __init__(
        self,
        store: DataStore,
        min_chars: int = 3,
        error_handler: Optional[ErrorHandler] = None
    ):
        self.store = store
        self.min_chars = min_chars
        self.error_handler = error_handler or ErrorHandler("suggestions")

    async def resolve(self, location_text: str) -> Dict[str, LocationSuggestion]:
        """Build the suggestion panel for the given text.

        Exact (case-insensitive) matches on location, city or region win; only
        when there are none does the lookup fall back to substring matches.
        Results are ordered by property count, highest first.

        Args:
            location_text: What the user has typed so far

        Returns:
            Mapping of ``"location - city, region"`` labels to suggestions,
            empty for short input or on any store failure
        """
        if len(location_text or "") < self.min_chars:
            return {}

        term = location_text.strip()
        if not term:
            return {}

        stats = await self.error_handler.fail_open(self._lookup, term, fallback=None)
        if stats is None:
            return {}

        suggestions: Dict[str, LocationSuggestion] = {}
        for stat in stats:
            suggestions[stat.label] = LocationSuggestion(
                count=stat.property_count,
                location=stat.location,
                city=stat.city,
                region=stat.region,
            )
        logger.debug(f"{len(suggestions)} suggestion(s) for {term!r}")
        return suggestions

    async def _lookup(self, term: str) -> List[LocationStat]:
        rows = await self.store.select(
            self.TABLE,
            Query()
            .or_(*(Condition.iexact(column, term) for column in LOCATION_COLUMNS))
            .order("property_count", descending=True)
        )

        if not rows:
            rows = await self.store.select(
                self.TABLE,
                Query()
                .or_(*(Condition.contains(column, term) for column in LOCATION_COLUMNS))
                .order("property_count", descending=True)
            )

        return [LocationStat.from_row(row) for row in rows]
