"""
JSON codec for the persisted idea collection.

The whole collection is one JSON array of idea objects: no envelope,
no version field. Encoding is deterministic, so encoding a freshly
decoded blob reproduces it byte for byte.
"""

import json
from typing import List, Sequence

from braindrop.errors import DecodeError
from braindrop.models.idea import Idea, idea_from_dict


def dumps_collection(ideas: Sequence[Idea], indent: int = None) -> str:
    """
    Serialize ideas to the persisted JSON array.

    Args:
        ideas: Records to serialize, in collection order.
        indent: Pretty-print indentation (None for compact output).
    """
    separators = (",", ": ") if indent else (",", ":")
    return json.dumps(
        [idea.to_dict() for idea in ideas],
        ensure_ascii=False,
        indent=indent,
        separators=separators,
    )


def loads_collection(blob: str) -> List[Idea]:
    """
    Parse a persisted JSON array into idea records.

    Raises:
        DecodeError: If the blob is not JSON, not an array, contains an
            invalid record, or repeats an id.
    """
    try:
        raw = json.loads(blob)
    except (json.JSONDecodeError, TypeError) as e:
        raise DecodeError(f"idea collection is not valid JSON: {e}") from e

    if not isinstance(raw, list):
        raise DecodeError(
            f"idea collection must be a JSON array, got {type(raw).__name__}"
        )

    ideas = [idea_from_dict(entry) for entry in raw]

    seen = set()
    for idea in ideas:
        if idea.id in seen:
            raise DecodeError(f"idea collection contains duplicate id {idea.id!r}")
        seen.add(idea.id)

    return ideas
