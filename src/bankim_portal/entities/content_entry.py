"""Aggregated multilingual content entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ContentKind(str, Enum):
    """Classification of a content action by its component type."""

    DROPDOWN = "dropdown"
    TEXT = "text"
    LINK = "link"
    MIXED = "mixed"

    @classmethod
    def from_component_type(cls, component_type: str | None) -> "ContentKind":
        """Map a backend component_type onto a kind; unknown types are mixed."""
        try:
            kind = cls(component_type)
        except ValueError:
            return cls.MIXED
        return kind


class ContentStatus(str, Enum):
    PUBLISHED = "published"
    DRAFT = "draft"

    @classmethod
    def from_backend(cls, status: str | None) -> "ContentStatus":
        return cls.PUBLISHED if status == "approved" else cls.DRAFT


@dataclass(frozen=True)
class AggregationDefaults:
    """Bookkeeping values stamped on every aggregated entry.

    Attributes:
        category: Content category of the aggregated screen
        created_at: Creation marker
        last_modified: Modification marker
        created_by: Actor that created the content
        modified_by: Actor that last modified the content
        url_template: Format string receiving the sequence number
    """

    category: str = "main"
    created_at: datetime = datetime(2024, 12, 1)
    last_modified: datetime = datetime(2024, 12, 15)
    created_by: str = "content-manager"
    modified_by: str = "content-manager"
    url_template: str = "/dropdown-action-{sequence}"


@dataclass(frozen=True)
class ContentMetadata:
    category: str
    created_at: datetime
    last_modified: datetime
    created_by: str
    modified_by: str
    url: str

    @classmethod
    def from_defaults(cls, defaults: AggregationDefaults, sequence: int) -> "ContentMetadata":
        return cls(
            category=defaults.category,
            created_at=defaults.created_at,
            last_modified=defaults.last_modified,
            created_by=defaults.created_by,
            modified_by=defaults.modified_by,
            url=defaults.url_template.format(sequence=sequence),
        )


@dataclass
class AggregatedContentEntry:
    """One logical content action merged across languages.

    Titles are filled in as each language response is processed, so this
    entity is mutable while the aggregator builds it.

    Attributes:
        id: Stable identifier derived from the sequence number
        sequence: Ordering key extracted from the content key
        metadata: Bookkeeping fields (creation/modification markers, owner)
        status: Publish state derived from the backend status
        kind: Inferred component classification
        titles: Localized title per language code
        title: Canonical display title (primary language value)
        action_count: Number of dropdown options, at least 1
    """

    id: str
    sequence: int
    metadata: ContentMetadata
    status: ContentStatus = ContentStatus.DRAFT
    kind: ContentKind = ContentKind.MIXED
    titles: dict[str, str] = field(default_factory=dict)
    title: str | None = None
    action_count: int = 1
