"""
Build the configured storage backend and store.
"""

from pathlib import Path
from typing import Union

from braindrop.config import (
    BRAINDROP_STORAGE_BACKEND,
    BRAINDROP_STORAGE_SLOT,
    VALID_STORAGE_BACKENDS,
    get_data_dir,
)
from braindrop.storage import JsonFileStorage, MemoryStorage, Storage
from braindrop.store.idea_store import IdeaStore


def create_storage(
    backend: str = None,
    data_dir: Union[str, Path] = None,
    slot: str = None,
) -> Storage:
    """
    Create a storage backend, falling back to configuration for anything
    not given.

    Raises:
        ValueError: If the backend name is unknown.
    """
    backend = (backend or BRAINDROP_STORAGE_BACKEND).lower()
    slot = slot or BRAINDROP_STORAGE_SLOT

    if backend == "file":
        return JsonFileStorage(data_dir=data_dir or get_data_dir(), slot=slot)
    if backend == "memory":
        return MemoryStorage(slot=slot)

    raise ValueError(
        f"Unknown storage backend {backend!r} (expected one of {', '.join(VALID_STORAGE_BACKENDS)})"
    )


def create_store(storage: Storage = None, initialize: bool = True) -> IdeaStore:
    """
    Create an IdeaStore over the given (or configured) storage.

    Args:
        storage: Backend to use. Defaults to create_storage().
        initialize: Load the collection before returning.
    """
    store = IdeaStore(storage or create_storage())
    if initialize:
        store.initialize()
    return store
