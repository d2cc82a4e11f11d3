"""
Core data model for Braindrop.

An idea is one captured note. There are three kinds, keyed on ``type``:

    text   -> TextIdea   (title + content)
    voice  -> VoiceIdea  (title + optional description + recording_uri)
    image  -> ImageIdea  (title + optional description + uri)

Each kind declares only the fields relevant to it. All variants share
id, title, tags, is_favorite, created_at and updated_at.

Records are frozen: the store replaces a record rather than mutating it,
so a snapshot handed to a caller never changes underneath them.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Sequence, Union

from braindrop.errors import DecodeError, ValidationError


class IdeaType(str, Enum):
    """The kind of note captured."""

    TEXT = "text"
    VOICE = "voice"
    IMAGE = "image"


# Persisted (JSON) field name for each Python attribute, in persisted order.
JSON_FIELD_NAMES: Dict[str, str] = {
    "id": "id",
    "type": "type",
    "title": "title",
    "content": "content",
    "description": "description",
    "tags": "tags",
    "is_favorite": "isFavorite",
    "uri": "uri",
    "recording_uri": "recordingUri",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

ATTRIBUTE_NAMES: Dict[str, str] = {v: k for k, v in JSON_FIELD_NAMES.items()}

# Optional per-variant attributes, written only when set
_OPTIONAL_ATTRIBUTES = ("description", "uri", "recording_uri")


# =============================================================================
# Helpers
# =============================================================================

def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_tags(tags: Optional[Iterable[str]]) -> tuple:
    """
    Trim, lowercase and deduplicate tags, keeping first-seen order.

    Empty tags (after trimming) are dropped. A single string is one tag.

    Example:
        >>> normalize_tags([" Work", "idea", "WORK", ""])
        ('work', 'idea')
    """
    if not tags:
        return ()
    if isinstance(tags, str):
        tags = [tags]

    result: List[str] = []
    for tag in tags:
        tag = str(tag).strip().lower()
        if tag and tag not in result:
            result.append(tag)
    return tuple(result)


def is_tag_list(value: Any) -> bool:
    """True for a list or tuple of strings (None counts as no tags)."""
    if value is None:
        return True
    return isinstance(value, (list, tuple)) and all(isinstance(t, str) for t in value)


def coerce_idea_type(value: Union["IdeaType", str]) -> IdeaType:
    """
    Convert a string to an IdeaType.

    Raises:
        ValueError: If the value is not one of text, voice, image.
    """
    if isinstance(value, IdeaType):
        return value
    return IdeaType(str(value).strip().lower())


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime as an ISO-8601 UTC string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _from_epoch_ms(value: float) -> datetime:
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"epoch timestamp out of range: {value!r}") from e


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a persisted timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (with or without offset, "Z" suffix allowed)
    and epoch milliseconds, either as a number or a numeric string. Older
    clients wrote updatedAt in the latter form.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        raise ValueError(f"not a timestamp: {value!r}")
    elif isinstance(value, (int, float)):
        parsed = _from_epoch_ms(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            parsed = _from_epoch_ms(int(text))
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    else:
        raise ValueError(f"not a timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def validate_idea_fields(idea_type: Any, title: Any, content: Any = "") -> List[str]:
    """
    Check the record rules shared by creation and update.

    A candidate is valid iff its title is non-empty after trimming and,
    for text ideas, its content is non-empty after trimming.

    Returns:
        List of problems (empty if valid).
    """
    problems = []

    try:
        idea_type = coerce_idea_type(idea_type)
    except ValueError:
        problems.append(f"type must be one of text, voice, image, got {idea_type!r}")
        idea_type = None

    if not isinstance(title, str) or not title.strip():
        problems.append("title is required and cannot be empty")

    if idea_type is IdeaType.TEXT:
        if not isinstance(content, str) or not content.strip():
            problems.append("content is required for text ideas")

    return problems


# =============================================================================
# Record variants
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class Idea:
    """
    Fields common to every kind of idea.

    Do not instantiate directly; use TextIdea, VoiceIdea or ImageIdea
    (or idea_from_dict for persisted data).

    Attributes:
        id: Opaque unique identifier assigned by the store.
        title: Short name of the idea.
        tags: Lowercase, deduplicated labels in first-seen order.
        is_favorite: Whether the user starred this idea.
        created_at: When the idea was captured (never changes).
        updated_at: When the idea was last changed.
    """

    type: ClassVar[IdeaType]

    id: str
    title: str
    tags: tuple = ()
    is_favorite: bool = False
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", normalize_tags(self.tags))
        self.validate()

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If the record breaks the title/content rules.
        """
        problems = validate_idea_fields(self.type, self.title, self.content)
        if not isinstance(self.id, str) or not self.id:
            problems.append("id is required and must be a string")
        if problems:
            raise ValidationError(problems)

    @classmethod
    def field_names(cls) -> frozenset:
        """Names of the dataclass fields this variant stores."""
        return frozenset(f.name for f in fields(cls))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the persisted JSON object.

        Keys are camelCase, timestamps ISO-8601. ``content`` is always
        present; description, uri and recordingUri only when set.
        """
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "content": self.content,
        }
        if getattr(self, "description", None) is not None:
            data["description"] = self.description
        data["tags"] = list(self.tags)
        data["isFavorite"] = self.is_favorite
        for attr in ("uri", "recording_uri"):
            value = getattr(self, attr, None)
            if value is not None:
                data[JSON_FIELD_NAMES[attr]] = value
        data["createdAt"] = format_timestamp(self.created_at)
        data["updatedAt"] = format_timestamp(self.updated_at)
        return data

    def __str__(self) -> str:
        star = "*" if self.is_favorite else " "
        return f"{star} [{self.type.value}] {self.title}"


@dataclass(frozen=True, kw_only=True)
class TextIdea(Idea):
    """A typed note. Content is required."""

    type: ClassVar[IdeaType] = IdeaType.TEXT

    content: str


@dataclass(frozen=True, kw_only=True)
class MediaIdea(Idea):
    """Shared shape of voice and image ideas: no body text, a description."""

    content: ClassVar[str] = ""

    description: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class VoiceIdea(MediaIdea):
    """A recorded voice memo."""

    type: ClassVar[IdeaType] = IdeaType.VOICE

    recording_uri: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class ImageIdea(MediaIdea):
    """A captured or picked image."""

    type: ClassVar[IdeaType] = IdeaType.IMAGE

    uri: Optional[str] = None


IDEA_CLASSES: Dict[IdeaType, type] = {
    IdeaType.TEXT: TextIdea,
    IdeaType.VOICE: VoiceIdea,
    IdeaType.IMAGE: ImageIdea,
}


# =============================================================================
# Creation input
# =============================================================================

@dataclass
class NewIdea:
    """
    Caller-supplied input for creating an idea.

    Carries no id and no timestamps; the store assigns those. Fields that
    do not apply to the chosen type are dropped on creation.
    """

    title: str
    type: Union[IdeaType, str] = IdeaType.TEXT
    content: str = ""
    description: Optional[str] = None
    tags: Sequence[str] = field(default_factory=list)
    is_favorite: bool = False
    uri: Optional[str] = None
    recording_uri: Optional[str] = None

    def validate(self) -> List[str]:
        """Return the list of problems with this input (empty if valid)."""
        problems = validate_idea_fields(self.type, self.title, self.content)
        if not is_tag_list(self.tags):
            problems.append("tags must be a list of strings")
        for name in _OPTIONAL_ATTRIBUTES:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                problems.append(f"{name} must be a string")
        return problems

    def is_valid(self) -> bool:
        return not self.validate()

    def build(self, idea_id: str, timestamp: datetime) -> Idea:
        """
        Construct the stored record for this input.

        Title, content and description are trimmed; tags are normalized.

        Raises:
            ValidationError: If the input is invalid.
        """
        problems = self.validate()
        if problems:
            raise ValidationError(problems)

        idea_type = coerce_idea_type(self.type)
        common = dict(
            id=idea_id,
            title=self.title.strip(),
            tags=normalize_tags(self.tags),
            is_favorite=bool(self.is_favorite),
            created_at=timestamp,
            updated_at=timestamp,
        )

        if idea_type is IdeaType.TEXT:
            return TextIdea(content=self.content.strip(), **common)

        description = self.description.strip() if self.description else None
        if idea_type is IdeaType.VOICE:
            return VoiceIdea(
                description=description or None,
                recording_uri=self.recording_uri,
                **common,
            )
        return ImageIdea(description=description or None, uri=self.uri, **common)


# =============================================================================
# Decoding
# =============================================================================

def _decode_tags(value: Any) -> tuple:
    if value is None:
        return ()
    if not is_tag_list(value):
        raise TypeError(f"tags must be a list of strings, got {value!r}")
    return normalize_tags(value)


def idea_from_dict(data: Dict[str, Any]) -> Idea:
    """
    Create the right Idea variant from a persisted JSON object.

    Raises:
        DecodeError: If the object is not a valid idea record.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"idea record must be an object, got {type(data).__name__}")

    try:
        idea_type = coerce_idea_type(data["type"])
        cls = IDEA_CLASSES[idea_type]
        kwargs: Dict[str, Any] = {
            "id": data["id"],
            "title": data["title"],
            "tags": _decode_tags(data.get("tags")),
            "is_favorite": bool(data.get("isFavorite", False)),
            "created_at": parse_timestamp(data["createdAt"]),
            "updated_at": parse_timestamp(data["updatedAt"]),
        }
        if idea_type is IdeaType.TEXT:
            kwargs["content"] = data["content"]
        else:
            kwargs["description"] = data.get("description")
            if idea_type is IdeaType.VOICE:
                kwargs["recording_uri"] = data.get("recordingUri")
            else:
                kwargs["uri"] = data.get("uri")
        return cls(**kwargs)
    except KeyError as e:
        raise DecodeError(f"idea record is missing field {e.args[0]!r}") from e
    except (TypeError, ValueError, ValidationError) as e:
        raise DecodeError(f"invalid idea record {data.get('id')!r}: {e}") from e
