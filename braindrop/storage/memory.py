"""
In-memory storage for testing and ephemeral runs.

Keeps the serialized blob rather than the records themselves, so loads
and saves go through the same codec as the file backend.
"""

from typing import Dict, List, Optional, Sequence

from braindrop.errors import StorageUnavailable
from braindrop.models.idea import Idea
from braindrop.storage.base import DEFAULT_SLOT, SaveResult, Storage
from braindrop.storage.codec import dumps_collection, loads_collection


class MemoryStorage(Storage):
    """
    In-memory storage backend.

    Data is lost when the process ends. Reads and writes can be made to
    fail (``fail_reads`` / ``fail_writes``) to exercise error paths.
    """

    def __init__(self, slot: str = DEFAULT_SLOT, blob: Optional[str] = None):
        self.slot = slot
        self._slots: Dict[str, str] = {}
        if blob is not None:
            self._slots[slot] = blob

        self.fail_reads = False
        self.fail_writes = False
        self.save_calls = 0
        self.clear_calls = 0

    @property
    def name(self) -> str:
        return "memory"

    @property
    def blob(self) -> Optional[str]:
        """The raw stored blob, or None if the slot is empty."""
        return self._slots.get(self.slot)

    def load(self) -> List[Idea]:
        if self.fail_reads:
            raise StorageUnavailable("Simulated read failure", slot=self.slot)

        blob = self._slots.get(self.slot)
        if blob is None:
            return []
        return loads_collection(blob)

    def save(self, ideas: Sequence[Idea]) -> SaveResult:
        self.save_calls += 1
        if self.fail_writes:
            raise StorageUnavailable("Simulated write failure", slot=self.slot)

        blob = dumps_collection(ideas)
        self._slots[self.slot] = blob
        return SaveResult(records_written=len(ideas), bytes_written=len(blob.encode("utf-8")))

    def clear(self) -> None:
        self.clear_calls += 1
        if self.fail_writes:
            raise StorageUnavailable("Simulated write failure", slot=self.slot)
        self._slots.pop(self.slot, None)

    def count(self) -> int:
        """Return number of stored records (for testing)."""
        return len(self.load())
