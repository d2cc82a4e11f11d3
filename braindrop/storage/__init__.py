"""
Storage module.

Handles persistence of the idea collection as a single JSON blob.
"""

from braindrop.storage.base import Storage, SaveResult, DEFAULT_SLOT
from braindrop.storage.codec import dumps_collection, loads_collection
from braindrop.storage.json_file import JsonFileStorage
from braindrop.storage.memory import MemoryStorage

__all__ = [
    "Storage",
    "SaveResult",
    "DEFAULT_SLOT",
    "dumps_collection",
    "loads_collection",
    "JsonFileStorage",
    "MemoryStorage",
]
