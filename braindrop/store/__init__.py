"""
Store module.

The single owner of the idea collection. Everything that changes ideas
goes through an IdeaStore.
"""

from braindrop.store.idea_store import IdeaStore, UPDATABLE_FIELDS, IGNORED_FIELDS
from braindrop.store.factory import create_storage, create_store

__all__ = [
    "IdeaStore",
    "UPDATABLE_FIELDS",
    "IGNORED_FIELDS",
    "create_storage",
    "create_store",
]
