"""
Property search module.

Location suggestions, query composition, the result broadcast channel and
the search form controller.
"""

from .broadcast import ResultBroadcast
from .suggestions import LocationSuggestionResolver
from .composer import PropertyQueryComposer, location_conditions
from .form import SearchForm, SEARCH_ERROR_MESSAGE, not_found_message

__all__ = [
    'ResultBroadcast',
    'LocationSuggestionResolver',
    'PropertyQueryComposer',
    'location_conditions',
    'SearchForm',
    'SEARCH_ERROR_MESSAGE',
    'not_found_message',
]
