"""
Error types raised by the idea store and its persistence layer.

Callers above the store (CLI, web API) catch these and translate them
into exit codes or HTTP statuses. The store itself never retries.
"""

from typing import List, Optional


class BraindropError(Exception):
    """Base class for all braindrop errors."""


class ValidationError(BraindropError):
    """
    A candidate idea (or an update to one) breaks the record rules.

    Attributes:
        problems: Human-readable list of what is wrong with the input.
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__(f"Idea validation failed: {'; '.join(self.problems)}")


class NotFoundError(BraindropError):
    """No idea with the given id exists in the collection."""

    def __init__(self, idea_id: str):
        self.idea_id = idea_id
        super().__init__(f"No idea with id {idea_id!r}")


class StorageUnavailable(BraindropError):
    """The persistence medium could not be read or written."""

    def __init__(self, message: str, slot: Optional[str] = None):
        self.slot = slot
        super().__init__(message)


class DecodeError(BraindropError):
    """The persisted blob exists but is not a valid idea collection."""


class StoreNotReadyError(BraindropError):
    """The store was used before initialize() succeeded."""

    def __init__(self):
        super().__init__("Idea store is not initialized; call initialize() first")
