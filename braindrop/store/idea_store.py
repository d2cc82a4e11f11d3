"""
Idea store for Braindrop.

Owns the authoritative in-memory idea collection and keeps it in step
with the persisted copy:

    caller -> mutation -> new collection computed -> storage.save -> installed

Every mutation performs exactly one persistence call before returning.
The new collection is only installed in memory after the write succeeds,
so a failed save leaves memory exactly as it was (and as it is on disk)
and the StorageUnavailable error reaches the caller.

All read-modify-persist sequences run under one lock, so concurrent
callers (e.g. web worker threads) cannot both start from the same
snapshot and lose each other's update.
"""

import dataclasses
import logging
import threading
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from braindrop.errors import NotFoundError, StoreNotReadyError, ValidationError
from braindrop.models.idea import (
    ATTRIBUTE_NAMES,
    Idea,
    NewIdea,
    is_tag_list,
    normalize_tags,
    utc_now,
    validate_idea_fields,
)
from braindrop.query.engine import IdeaStats, compute_stats
from braindrop.storage.base import Storage
from braindrop.storage.codec import dumps_collection

logger = logging.getLogger(__name__)


# Fields a caller may change through update()
UPDATABLE_FIELDS = frozenset({
    "title",
    "content",
    "description",
    "tags",
    "is_favorite",
    "uri",
    "recording_uri",
})

# Fields silently ignored by update(): identity, kind and timestamps
IGNORED_FIELDS = frozenset({"id", "type", "created_at", "updated_at"})

# Smallest step between successive updated_at values of one record
_TICK = timedelta(microseconds=1)


def _new_id() -> str:
    return str(uuid.uuid4())


class IdeaStore:
    """
    In-memory idea collection backed by a Storage.

    Args:
        storage: Persistence backend holding the collection.
        clock: Returns the current aware datetime. Defaults to UTC now.
        id_factory: Returns a fresh idea id. Defaults to uuid4 strings.
    """

    def __init__(
        self,
        storage: Storage,
        clock: Callable[[], datetime] = None,
        id_factory: Callable[[], str] = None,
    ):
        self.storage = storage
        self._clock = clock or utc_now
        self._id_factory = id_factory or _new_id
        self._ideas: List[Idea] = []
        self._ready = False
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        """True once initialize() has succeeded."""
        return self._ready

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreNotReadyError()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self) -> None:
        """
        Load the collection from storage and mark the store ready.

        On failure the error propagates and the store is left (or put back)
        in the uninitialized state; it never falls back to an empty
        collection.

        Raises:
            StorageUnavailable: If storage cannot be read.
            DecodeError: If the stored collection is corrupt.
        """
        with self._lock:
            self._ready = False
            self._ideas = []
            ideas = self.storage.load()
            self._ideas = list(ideas)
            self._ready = True

        logger.info("Idea store ready with %d ideas (%s)", len(ideas), self.storage.name)

    # =========================================================================
    # Reads
    # =========================================================================

    def list(self) -> List[Idea]:
        """Return a copy of the collection. Callers must not rely on its order."""
        with self._lock:
            self._require_ready()
            return list(self._ideas)

    def get(self, idea_id: str) -> Idea:
        """
        Raises:
            NotFoundError: If no idea has this id.
        """
        with self._lock:
            self._require_ready()
            return self._ideas[self._index_of(idea_id)]

    def stats(self, today: Optional[date] = None) -> IdeaStats:
        """Summary counts over the current collection."""
        return compute_stats(self.list(), today=today)

    def export_json(self) -> str:
        """The collection in its persisted JSON form, pretty printed."""
        return dumps_collection(self.list(), indent=2)

    # =========================================================================
    # Mutations
    # =========================================================================

    def create(self, candidate: NewIdea) -> Idea:
        """
        Validate and add a new idea at the front of the collection.

        Assigns the id and both timestamps, normalizes tags, and drops any
        field that does not belong to the idea's type.

        Raises:
            ValidationError: If the candidate is invalid (nothing is written).
            StorageUnavailable: If the collection could not be saved.
        """
        problems = candidate.validate()
        if problems:
            raise ValidationError(problems)

        with self._lock:
            self._require_ready()

            idea_id = self._id_factory()
            while any(existing.id == idea_id for existing in self._ideas):
                idea_id = self._id_factory()

            idea = candidate.build(idea_id, self._clock())
            self._commit([idea] + self._ideas)

        logger.debug("Created %s idea %s", idea.type.value, idea.id)
        return idea

    def update(self, idea_id: str, /, **changes: Any) -> Idea:
        """
        Merge the given fields onto an existing idea.

        Field names may be given in Python form (is_favorite) or persisted
        form (isFavorite). id, type, created_at and updated_at are ignored,
        as are fields that do not belong to the idea's type. Tags are
        re-normalized. updated_at is always refreshed and strictly
        increases.

        Raises:
            NotFoundError: If no idea has this id.
            ValidationError: On unknown fields or if the result breaks the
                title/content rules (nothing is written).
            StorageUnavailable: If the collection could not be saved.
        """
        changes = self._normalize_changes(changes)

        with self._lock:
            self._require_ready()
            index = self._index_of(idea_id)
            current = self._ideas[index]

            applicable = {}
            for name, value in changes.items():
                if name in current.field_names():
                    applicable[name] = value
                else:
                    logger.debug(
                        "Ignoring %s for %s idea %s", name, current.type.value, idea_id
                    )

            if "tags" in applicable:
                applicable["tags"] = normalize_tags(applicable["tags"])

            problems = validate_idea_fields(
                current.type,
                applicable.get("title", current.title),
                applicable.get("content", current.content),
            )
            if problems:
                raise ValidationError(problems)

            applicable["updated_at"] = self._next_timestamp(current.updated_at)
            updated = dataclasses.replace(current, **applicable)

            ideas = list(self._ideas)
            ideas[index] = updated
            self._commit(ideas)

        logger.debug("Updated idea %s (%s)", idea_id, ", ".join(sorted(applicable)))
        return updated

    def toggle_favorite(self, idea_id: str) -> Idea:
        """
        Flip is_favorite on an idea.

        Raises:
            NotFoundError: If no idea has this id.
        """
        # Read and write under one lock so two toggles never see the same value
        with self._lock:
            self._require_ready()
            index = self._index_of(idea_id)
            current = self._ideas[index]
            updated = dataclasses.replace(
                current,
                is_favorite=not current.is_favorite,
                updated_at=self._next_timestamp(current.updated_at),
            )
            ideas = list(self._ideas)
            ideas[index] = updated
            self._commit(ideas)

        logger.debug("Toggled favorite on %s -> %s", idea_id, updated.is_favorite)
        return updated

    def delete(self, idea_id: str) -> None:
        """
        Remove an idea. Deleting an id that is not present is a no-op,
        not an error; the collection is still written once.

        Raises:
            StorageUnavailable: If the collection could not be saved.
        """
        with self._lock:
            self._require_ready()
            remaining = [idea for idea in self._ideas if idea.id != idea_id]
            if len(remaining) == len(self._ideas):
                logger.debug("Delete of unknown idea %s ignored", idea_id)
            self._commit(remaining)

    def clear_all(self) -> None:
        """
        Remove every idea from memory and from storage.

        Raises:
            StorageUnavailable: If storage could not be cleared (memory is
                left unchanged).
        """
        with self._lock:
            self._require_ready()
            self.storage.clear()
            count = len(self._ideas)
            self._ideas = []

        logger.info("Cleared %d ideas", count)

    # =========================================================================
    # Internals (caller holds the lock)
    # =========================================================================

    def _index_of(self, idea_id: str) -> int:
        for index, idea in enumerate(self._ideas):
            if idea.id == idea_id:
                return index
        raise NotFoundError(idea_id)

    def _commit(self, ideas: List[Idea]) -> None:
        """Persist the new collection, then install it in memory."""
        self.storage.save(ideas)
        self._ideas = ideas

    def _next_timestamp(self, previous: datetime) -> datetime:
        now = self._clock()
        if now <= previous:
            now = previous + _TICK
        return now

    @staticmethod
    def _normalize_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
        """Map persisted names to attributes, drop ignored fields, reject unknown ones."""
        normalized = {}
        unknown = []

        for name, value in changes.items():
            name = ATTRIBUTE_NAMES.get(name, name)
            if name in IGNORED_FIELDS:
                continue
            if name not in UPDATABLE_FIELDS:
                unknown.append(name)
                continue
            normalized[name] = value

        if unknown:
            raise ValidationError([f"unknown field {name!r}" for name in sorted(unknown)])

        if "title" in normalized and isinstance(normalized["title"], str):
            normalized["title"] = normalized["title"].strip()
        if "content" in normalized and isinstance(normalized["content"], str):
            normalized["content"] = normalized["content"].strip()
        if "tags" in normalized and not is_tag_list(normalized["tags"]):
            raise ValidationError(["tags must be a list of strings"])
        for name in ("description", "uri", "recording_uri"):
            value = normalized.get(name)
            if value is not None and not isinstance(value, str):
                raise ValidationError([f"{name} must be a string"])
        if "is_favorite" in normalized:
            normalized["is_favorite"] = bool(normalized["is_favorite"])

        return normalized
