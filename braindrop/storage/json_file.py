"""
File-backed storage for Braindrop.

The collection lives in a single JSON file, ``<data_dir>/<slot>.json``.
Saves go through a temporary file in the same directory which is
fsynced and then renamed over the slot, so readers only ever see the
previous collection or the new one.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Sequence, Union

from braindrop.errors import DecodeError, StorageUnavailable
from braindrop.models.idea import Idea
from braindrop.storage.base import DEFAULT_SLOT, SaveResult, Storage
from braindrop.storage.codec import dumps_collection, loads_collection

logger = logging.getLogger(__name__)


class JsonFileStorage(Storage):
    """
    Storage implementation backed by one JSON file per slot.

    Configuration is pulled from braindrop.config when not given:
    - BRAINDROP_DATA_DIR: directory holding the slot file
    - BRAINDROP_STORAGE_SLOT: slot name (file stem)
    """

    def __init__(
        self,
        data_dir: Union[str, Path] = None,
        slot: str = None,
    ):
        """
        Initialize JsonFileStorage.

        Args:
            data_dir: Directory for the slot file. Defaults to config.get_data_dir().
            slot: Slot name. Defaults to config.BRAINDROP_STORAGE_SLOT.
        """
        if data_dir is None or slot is None:
            from braindrop.config import BRAINDROP_STORAGE_SLOT, get_data_dir

            data_dir = data_dir if data_dir is not None else get_data_dir()
            slot = slot if slot is not None else BRAINDROP_STORAGE_SLOT

        self.data_dir = Path(data_dir)
        self.slot = slot or DEFAULT_SLOT

    @property
    def name(self) -> str:
        return "json_file"

    @property
    def path(self) -> Path:
        """Location of the slot file."""
        return self.data_dir / f"{self.slot}.json"

    def load(self) -> List[Idea]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug("No stored collection at %s", self.path)
            return []
        except OSError as e:
            logger.error("Failed to read %s: %s", self.path, e)
            raise StorageUnavailable(f"Cannot read {self.path}: {e}", slot=self.slot) from e

        try:
            blob = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"{self.path} is not UTF-8 text: {e}") from e

        ideas = loads_collection(blob)
        logger.info("Loaded %d ideas from %s", len(ideas), self.path)
        return ideas

    def save(self, ideas: Sequence[Idea]) -> SaveResult:
        data = dumps_collection(ideas).encode("utf-8")
        tmp_path = None

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.slot}.", suffix=".tmp", dir=self.data_dir
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            logger.error("Failed to write %s: %s", self.path, e)
            raise StorageUnavailable(f"Cannot write {self.path}: {e}", slot=self.slot) from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_path)

        logger.debug("Saved %d ideas (%d bytes) to %s", len(ideas), len(data), self.path)
        return SaveResult(records_written=len(ideas), bytes_written=len(data))

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to remove %s: %s", self.path, e)
            raise StorageUnavailable(f"Cannot remove {self.path}: {e}", slot=self.slot) from e
        logger.info("Cleared stored collection at %s", self.path)
