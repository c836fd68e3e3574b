"""Select a storage backend from configuration."""

import logging

from ideaswipe.config import STORAGE_BACKEND, VALID_BACKENDS
from ideaswipe.storage.base import Storage

logger = logging.getLogger(__name__)


def get_storage(backend: str = None) -> Storage:
    """
    Get the configured storage backend.

    Args:
        backend: "memory", "sqlite" or "airtable". Defaults to config.STORAGE_BACKEND.

    Returns:
        A Storage implementing both the idea and interaction stores.

    Raises:
        ValueError: If the backend name is unknown.
    """
    backend = (backend or STORAGE_BACKEND).lower()

    if backend == "memory":
        from ideaswipe.storage.memory import MemoryStorage
        storage = MemoryStorage()
    elif backend == "sqlite":
        from ideaswipe.storage.sqlite import SQLiteStorage
        storage = SQLiteStorage()
    elif backend == "airtable":
        from ideaswipe.storage.airtable import AirtableStorage
        storage = AirtableStorage()
    else:
        raise ValueError(
            f"Unknown storage backend {backend!r}; expected one of {', '.join(VALID_BACKENDS)}"
        )

    logger.info("Using %s storage backend", storage.name)
    return storage
