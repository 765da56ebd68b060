"""
Properties for a picked location suggestion.

After a suggestion is chosen, a popup lists every property matching the
label; it is only worth showing when more than one property matches.
"""

import logging
from typing import List

from realty_site.models import PropertyRecord
from realty_site.search import location_conditions
from realty_site.store import DataStore, Query


logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Erro ao buscar imóveis. Por favor, tente novamente."


class LocationSearchResults:
    """Loads the properties behind a location label."""

    def __init__(self, store: DataStore):
        self.store = store
        self.records: List[PropertyRecord] = []
        self.error_message = ""

    @property
    def should_show(self) -> bool:
        return len(self.records) > 1

    async def fetch(self, location: str) -> List[PropertyRecord]:
        """Load properties matching any '-'-separated part of ``location``."""
        self.records = []
        self.error_message = ""

        conditions = location_conditions(location or "")
        if not conditions:
            return self.records

        try:
            rows = await self.store.select("properties", Query().or_(*conditions))
            self.records = [PropertyRecord.from_row(row) for row in rows]
        except Exception as e:
            logger.error(f"Error fetching properties by location: {e}")
            self.error_message = FETCH_ERROR_MESSAGE
        return self.records
