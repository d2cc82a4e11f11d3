"""
Query engine for Braindrop.

Provides pure, side-effect-free functions over a snapshot of ideas
(typically the result of IdeaStore.list()):
1. Filter by type, favorite flag, tags, search text and capture date
2. Sort by creation time
3. Collect the distinct tags in use
4. Count ideas for the summary panels

All functions are deterministic and never mutate their input; each
returns a new list.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Union

from braindrop.models.idea import Idea, IdeaType, coerce_idea_type, normalize_tags


# =============================================================================
# Criteria
# =============================================================================

@dataclass
class IdeaFilter:
    """
    Filter criteria. All present criteria must hold (AND); empty or
    absent fields impose no constraint.

    Attributes:
        type: Only ideas of this kind.
        favorites_only: Only starred ideas.
        tags: Ideas sharing at least one of these tags (OR within the list).
            A plain string is a single tag.
        search_query: Case-insensitive substring of title, content or a tag.
        created_on: Only ideas captured on this UTC calendar date.
    """
    type: Optional[Union[IdeaType, str]] = None
    favorites_only: bool = False
    tags: Sequence[str] = field(default_factory=list)
    search_query: str = ""
    created_on: Optional[date] = None

    def is_empty(self) -> bool:
        """True when no criterion constrains the result."""
        return (
            not self.type
            and not self.favorites_only
            and not normalize_tags(self.tags)
            and not (self.search_query or "").strip()
            and self.created_on is None
        )


# =============================================================================
# Matching
# =============================================================================

def _created_date(idea: Idea) -> date:
    return idea.created_at.astimezone(timezone.utc).date()


def matches_search(idea: Idea, query: str) -> bool:
    """
    Check whether the query appears in the idea's title, content or tags.

    Matching is case-insensitive substring search. A blank query matches
    every idea.
    """
    query = (query or "").strip().lower()
    if not query:
        return True

    if query in idea.title.lower():
        return True
    if query in idea.content.lower():
        return True
    return any(query in tag for tag in idea.tags)


def matches_filter(idea: Idea, criteria: IdeaFilter) -> bool:
    """Check a single idea against every present criterion."""
    if criteria.type:
        if idea.type is not coerce_idea_type(criteria.type):
            return False

    if criteria.favorites_only and not idea.is_favorite:
        return False

    wanted_tags = normalize_tags(criteria.tags)
    if wanted_tags and not set(wanted_tags).intersection(idea.tags):
        return False

    if not matches_search(idea, criteria.search_query):
        return False

    if criteria.created_on is not None and _created_date(idea) != criteria.created_on:
        return False

    return True


def filter_ideas(ideas: Iterable[Idea], criteria: Optional[IdeaFilter] = None) -> List[Idea]:
    """
    Return the ideas matching all present criteria, in input order.

    Args:
        ideas: Snapshot to filter (not modified).
        criteria: Filter to apply. None or an empty filter returns a copy.

    Raises:
        ValueError: If criteria.type is not a known idea type.

    Example:
        >>> filter_ideas(ideas, IdeaFilter(tags=["work", "idea"]))
        # every idea tagged work OR idea
    """
    if criteria is None:
        return list(ideas)

    # Fail fast on a bad type even when the collection is empty
    if criteria.type:
        coerce_idea_type(criteria.type)

    return [idea for idea in ideas if matches_filter(idea, criteria)]


# =============================================================================
# Ordering
# =============================================================================

def sort_by_created_at(ideas: Iterable[Idea], ascending: bool = False) -> List[Idea]:
    """
    Order ideas by creation time.

    The sort is stable in both directions: ideas with equal created_at
    keep their relative input order, so sorting twice gives the same
    sequence.

    Args:
        ideas: Snapshot to sort (not modified).
        ascending: Oldest first if True, newest first (default) otherwise.
    """
    items = list(ideas)
    if ascending:
        return sorted(items, key=lambda idea: idea.created_at)

    # Negating the index keeps ties in input order under reverse=True
    indexed = sorted(
        enumerate(items),
        key=lambda pair: (pair[1].created_at, -pair[0]),
        reverse=True,
    )
    return [idea for _, idea in indexed]


def distinct_tags(ideas: Iterable[Idea]) -> List[str]:
    """
    Return every tag used in the collection, deduplicated case-insensitively
    and sorted ascending.
    """
    tags = set()
    for idea in ideas:
        tags.update(tag.lower() for tag in idea.tags)
    return sorted(tags)


# =============================================================================
# Summary counts
# =============================================================================

@dataclass
class IdeaStats:
    """
    Counters shown on the capture and settings screens.

    Attributes:
        total: Number of ideas.
        by_type: Count per idea type value ("text", "voice", "image").
        favorites: Number of starred ideas.
        today: Number of ideas captured on the reference date.
    """
    total: int = 0
    by_type: Dict[str, int] = field(
        default_factory=lambda: {t.value: 0 for t in IdeaType}
    )
    favorites: int = 0
    today: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_type": dict(self.by_type),
            "favorites": self.favorites,
            "today": self.today,
        }


def compute_stats(ideas: Iterable[Idea], today: Optional[date] = None) -> IdeaStats:
    """
    Count ideas in total, per type, starred, and captured today.

    Args:
        ideas: Snapshot to count.
        today: Reference UTC date for the "today" counter. Defaults to now.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()

    stats = IdeaStats()
    for idea in ideas:
        stats.total += 1
        stats.by_type[idea.type.value] += 1
        if idea.is_favorite:
            stats.favorites += 1
        if _created_date(idea) == today:
            stats.today += 1
    return stats
