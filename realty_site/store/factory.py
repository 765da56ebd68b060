"""Builds the configured store backend."""

import logging

from realty_site.config import StoreConfig
from .base import DataStore
from .memory_store import InMemoryDataStore
from .rest_client import RestDataStore


logger = logging.getLogger(__name__)


def create_store(config: StoreConfig) -> DataStore:
    """Create the store named by ``config.backend`` ("rest" or "memory")."""
    if config.backend == "memory":
        if config.seed_file:
            return InMemoryDataStore.from_seed_file(config.seed_file, base_url=config.url)
        logger.warning("Using an empty in-memory store (no STORE_SEED_FILE set)")
        return InMemoryDataStore(base_url=config.url)

    if config.backend == "rest":
        return RestDataStore(
            base_url=config.url,
            anon_key=config.anon_key,
            timeout_seconds=config.timeout_seconds,
        )

    raise ValueError(f"Unknown store backend: {config.backend!r}")
