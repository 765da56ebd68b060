"""
Store module for the realty site.

Provides the query builder and the clients for the external hosted backend.
"""

from .query import Condition, Query
from .base import AuthSession, DataStore
from .rest_client import RestDataStore
from .memory_store import InMemoryDataStore
from .factory import create_store

__all__ = [
    'Condition',
    'Query',
    'AuthSession',
    'DataStore',
    'RestDataStore',
    'InMemoryDataStore',
    'create_store',
]
