"""
Search form controller.

Owns the criteria the user is editing, the suggestion panel, the status
message and the in-progress flag, and wires them to the resolver, the
composer and the scroll-to-results hook.
"""

import dataclasses
import logging
from typing import Any, Callable, Dict, List, Optional

from realty_site.models import LocationSuggestion, PropertyRecord, SearchCriteria, SearchOutcome
from .composer import PropertyQueryComposer
from .suggestions import LocationSuggestionResolver


logger = logging.getLogger(__name__)

SEARCH_ERROR_MESSAGE = "Ocorreu um erro ao buscar imóveis. Por favor, tente novamente."


def not_found_message(location: str) -> str:
    """Message shown when a search completes with no results."""
    where = f' em "{location}"' if location else ""
    return f"Nenhum imóvel encontrado{where} com os critérios especificados."


class SearchForm:
    """State and actions of the hero search form.

    Attributes:
        criteria: Current selections
        suggestions: Suggestion panel contents, empty when hidden
        results: Results of the last successful search
        error_message: Message shown under the form, "" when none
        is_searching: True while a submitted search is in flight
        show_location_results: True after a suggestion was picked
    """

    def __init__(
        self,
        composer: PropertyQueryComposer,
        resolver: LocationSuggestionResolver,
        on_scroll_to_results: Optional[Callable[[], None]] = None
    ):
        self.composer = composer
        self.resolver = resolver
        self.on_scroll_to_results = on_scroll_to_results

        self.criteria = SearchCriteria()
        self.suggestions: Dict[str, LocationSuggestion] = {}
        self.results: List[PropertyRecord] = []
        self.error_message = ""
        self.is_searching = False
        self.show_location_results = False
        self._suggestion_seq = 0

    def update(self, **fields: Any) -> SearchCriteria:
        """Replace criteria fields other than the location text.

        Raises:
            CriteriaError: If a choice field gets an unknown value
        """
        if "location" in fields:
            raise TypeError("use set_location() to change the location text")
        self.criteria = dataclasses.replace(self.criteria, **fields)
        return self.criteria

    async def set_location(self, text: str) -> Dict[str, LocationSuggestion]:
        """Change the location text and refresh the suggestion panel.

        Input shorter than the resolver's minimum clears the panel without
        querying. If the user keeps typing while a lookup is in flight, the
        stale answer is discarded.
        """
        self.criteria = dataclasses.replace(self.criteria, location=text)
        self._suggestion_seq += 1
        seq = self._suggestion_seq

        if len(text) < self.resolver.min_chars:
            self.suggestions = {}
            return self.suggestions

        suggestions = await self.resolver.resolve(text)
        if seq == self._suggestion_seq:
            self.suggestions = suggestions
        return self.suggestions

    async def submit(self) -> Optional[SearchOutcome]:
        """Run the search for the current criteria.

        Returns:
            The outcome, or None if a search is already in flight
        """
        if self.is_searching:
            logger.debug("Search already in progress; ignoring submit")
            return None

        self.error_message = ""
        self.results = []
        self.is_searching = True
        criteria = self.criteria

        try:
            outcome = await self.composer.search(criteria)

            if not outcome.ok:
                self.error_message = SEARCH_ERROR_MESSAGE
                return outcome

            if not outcome.records:
                self.error_message = not_found_message(criteria.location)
                return outcome

            self.results = outcome.records
            if self.on_scroll_to_results is not None:
                self.on_scroll_to_results()
            return outcome
        except Exception as e:
            logger.error(f"Search failed unexpectedly: {e}")
            self.error_message = SEARCH_ERROR_MESSAGE
            return SearchOutcome(records=[], error=e)
        finally:
            self.is_searching = False

    async def select_suggestion(self, label: str) -> Optional[SearchOutcome]:
        """Use a suggestion label as the location and search immediately."""
        self._suggestion_seq += 1
        self.criteria = dataclasses.replace(self.criteria, location=label)
        self.suggestions = {}
        outcome = await self.submit()
        self.show_location_results = True
        return outcome

    def clear(self) -> None:
        """Reset every field, the panel, the message and the results."""
        self._suggestion_seq += 1
        self.criteria = SearchCriteria()
        self.suggestions = {}
        self.error_message = ""
        self.results = []
