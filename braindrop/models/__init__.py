"""
Data models module.

Defines the idea record variants and the creation input.
"""

from braindrop.models.idea import (
    Idea,
    IdeaType,
    TextIdea,
    MediaIdea,
    VoiceIdea,
    ImageIdea,
    NewIdea,
    IDEA_CLASSES,
    JSON_FIELD_NAMES,
    ATTRIBUTE_NAMES,
    idea_from_dict,
    normalize_tags,
    is_tag_list,
    coerce_idea_type,
    validate_idea_fields,
    format_timestamp,
    parse_timestamp,
    utc_now,
)

__all__ = [
    "Idea",
    "IdeaType",
    "TextIdea",
    "MediaIdea",
    "VoiceIdea",
    "ImageIdea",
    "NewIdea",
    "IDEA_CLASSES",
    "JSON_FIELD_NAMES",
    "ATTRIBUTE_NAMES",
    "idea_from_dict",
    "normalize_tags",
    "is_tag_list",
    "coerce_idea_type",
    "validate_idea_fields",
    "format_timestamp",
    "parse_timestamp",
    "utc_now",
]
