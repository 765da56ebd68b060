"""
Listing panels: featured properties and launches.

A FeaturedListings panel loads its own default set on mount and then shows
whatever the latest search broadcast carried until it is unmounted.
"""

import logging
from typing import Callable, List, Optional

from realty_site.models import PropertyRecord, SearchBroadcast
from realty_site.search import ResultBroadcast
from realty_site.site import SiteContent
from realty_site.store import DataStore, Query


logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Não foi possível carregar os imóveis. Por favor, tente novamente mais tarde."
LAUNCH_LOAD_ERROR_MESSAGE = "Não foi possível carregar os lançamentos. Por favor, tente novamente mais tarde."


async def load_featured(store: DataStore, fallback_limit: int = 6) -> List[PropertyRecord]:
    """Active featured properties in position order.

    When no featured row is active, the most recently created properties are
    used instead. Active rows that name no property still count as featured.
    """
    featured = await store.select(
        "featured_properties",
        Query().eq("active", True).order("position")
    )

    if featured:
        property_ids = [row["property_id"] for row in featured if row.get("property_id") is not None]
        if not property_ids:
            return []
        rows = await store.select("properties", Query().in_("id", property_ids))
        by_id = {str(row["id"]): row for row in rows}
        # Featured rows whose property was deleted are skipped
        return [
            PropertyRecord.from_row(by_id[str(pid)])
            for pid in property_ids
            if str(pid) in by_id
        ]

    rows = await store.select(
        "properties",
        Query().order("created_at", descending=True).limit(fallback_limit)
    )
    return [PropertyRecord.from_row(row) for row in rows]


class ListingDisplay:
    """A listing panel that follows search broadcasts while mounted.

    Attributes:
        records: What the panel currently shows
        error_message: Load failure message, "" when none
        loading: True until the default set has loaded
    """

    def __init__(
        self,
        store: DataStore,
        broadcast: ResultBroadcast,
        loader: Optional[Callable] = None,
        fallback_limit: int = 6
    ):
        self.store = store
        self.broadcast = broadcast
        self.loader = loader or load_featured
        self.fallback_limit = fallback_limit

        self.records: List[PropertyRecord] = []
        self.error_message = ""
        self.loading = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._broadcasts_seen = 0

    @property
    def is_mounted(self) -> bool:
        return self._unsubscribe is not None

    @property
    def heading(self) -> str:
        return "Imóveis em Destaque" if self.records else "Nenhum imóvel encontrado"

    async def mount(self) -> None:
        """Subscribe to searches and load the default set."""
        if self.is_mounted:
            return
        self._unsubscribe = self.broadcast.subscribe(self.on_search)
        seen = self._broadcasts_seen

        self.loading = True
        try:
            records = await self.loader(self.store, self.fallback_limit)
            # A search published during the load is newer than the default set
            if self._broadcasts_seen == seen:
                self.records = records
        except Exception as e:
            logger.error(f"Error loading featured listings: {e}")
            self.error_message = LOAD_ERROR_MESSAGE
        finally:
            self.loading = False

    def unmount(self) -> None:
        """Stop following searches."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_search(self, broadcast: SearchBroadcast) -> None:
        """Replace the shown records with the broadcast results."""
        self._broadcasts_seen += 1
        self.records = list(broadcast.results)


class LaunchDisplay:
    """The launches panel, listing ``property_launch`` newest first."""

    def __init__(self, store: DataStore):
        self.store = store
        self.records: List[PropertyRecord] = []
        self.error_message = ""
        self.loading = False

    async def mount(self) -> None:
        self.loading = True
        try:
            self.records = await SiteContent(self.store).fetch_launches()
        except Exception as e:
            logger.error(f"Error loading launches: {e}")
            self.error_message = LAUNCH_LOAD_ERROR_MESSAGE
        finally:
            self.loading = False

    @staticmethod
    def badge(record: PropertyRecord) -> str:
        return record.display_status or "Lançamento"
