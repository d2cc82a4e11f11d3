"""
Query module.

Filters, searches, sorts and counts snapshots of ideas.
"""

from braindrop.query.engine import (
    IdeaFilter,
    IdeaStats,
    matches_search,
    matches_filter,
    filter_ideas,
    sort_by_created_at,
    distinct_tags,
    compute_stats,
)

__all__ = [
    "IdeaFilter",
    "IdeaStats",
    "matches_search",
    "matches_filter",
    "filter_ideas",
    "sort_by_created_at",
    "distinct_tags",
    "compute_stats",
]
