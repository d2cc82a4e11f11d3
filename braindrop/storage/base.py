"""
Base storage abstraction for Braindrop.

Defines the interface every persistence backend implements. A backend
owns exactly one named slot holding the entire idea collection as a
single serialized blob. There is no incremental write: every save
replaces the whole collection.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from braindrop.models.idea import Idea


DEFAULT_SLOT = "braindrop_ideas"


@dataclass
class SaveResult:
    """
    Result of a save operation.

    Attributes:
        records_written: Number of ideas in the stored collection.
        bytes_written: Size of the serialized blob in bytes.
    """
    records_written: int = 0
    bytes_written: int = 0

    def __str__(self) -> str:
        return f"SaveResult(records={self.records_written}, bytes={self.bytes_written})"


class Storage(ABC):
    """
    Abstract base class for all storage backends.

    Implementations must provide:
    - load: read the whole collection ([] if never written)
    - save: atomically replace the whole collection
    - clear: remove the stored collection

    Failures to read or write the medium raise StorageUnavailable.
    A blob that exists but cannot be parsed raises DecodeError.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    @abstractmethod
    def load(self) -> List[Idea]:
        """
        Read the stored idea collection.

        "Not found" is not an error: a slot that was never written
        loads as an empty list.

        Returns:
            The stored ideas, in stored order.

        Raises:
            StorageUnavailable: If the medium cannot be read.
            DecodeError: If the stored blob is not a valid collection.
        """
        pass

    @abstractmethod
    def save(self, ideas: Sequence[Idea]) -> SaveResult:
        """
        Replace the stored collection with the given ideas.

        Either the whole new collection is stored or the previous one
        is left intact; no partial write is ever observable.

        Raises:
            StorageUnavailable: If the medium cannot be written.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """
        Remove the stored collection. Clearing an empty slot is a no-op.

        Raises:
            StorageUnavailable: If the medium cannot be written.
        """
        pass

    def __str__(self) -> str:
        return f"Storage({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
