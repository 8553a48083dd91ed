"""Multilingual content aggregation.

Merges independent per-language screen responses into one list of
AggregatedContentEntry objects, keyed by the sequence number embedded in
each content key (``app.main.action.<n>.dropdown.<name>``).
"""

import re
from collections.abc import Iterable
from typing import Any

from bankim_portal.dto.responses import ContentApiResponse
from bankim_portal.entities import (
    AggregatedContentEntry,
    AggregationDefaults,
    ContentKind,
    ContentMetadata,
    ContentStatus,
)

# First purely numeric dotted segment, e.g. "app.main.action.12.text.x" -> 12
SEQUENCE_KEY_PATTERN = re.compile(r"(?:^|\.)(\d+)\.")


def display_value(value: Any) -> str:
    """Text shown for a content value; list-valued sources show their first option."""
    if isinstance(value, list):
        return str(value[0]) if value else ""
    if value is None:
        return ""
    return str(value)


def aggregate(
    responses: Iterable[ContentApiResponse],
    primary_language: str = "ru",
    defaults: AggregationDefaults | None = None,
    key_pattern: re.Pattern[str] = SEQUENCE_KEY_PATTERN,
) -> list[AggregatedContentEntry]:
    """Merge per-language responses into ordered multilingual entries.

    Args:
        responses: One screen response per language, in processing order
        primary_language: Language whose value becomes the display title
        defaults: Bookkeeping values for new entries
        key_pattern: Regex whose first group captures the sequence number

    Returns:
        Entries with a display title, sorted ascending by sequence

    Note:
        When languages disagree on the component type of a sequence, the
        last processed response decides the kind.
    """
    defaults = defaults or AggregationDefaults()
    entries: dict[int, AggregatedContentEntry] = {}

    for response in responses:
        language = response.language_code
        for content_key, content in response.content.items():
            match = key_pattern.search(content_key)
            if not match:
                continue

            sequence = int(match.group(1))
            entry = entries.get(sequence)
            if entry is None:
                entry = AggregatedContentEntry(
                    id=f"action-{sequence}",
                    sequence=sequence,
                    metadata=ContentMetadata.from_defaults(defaults, sequence),
                    status=ContentStatus.from_backend(content.status),
                )
                entries[sequence] = entry

            title = display_value(content.value)
            if title:
                entry.titles[language] = title
                if language == primary_language:
                    entry.title = title

            entry.kind = ContentKind.from_component_type(content.component_type)
            if entry.kind is ContentKind.DROPDOWN and isinstance(content.value, list):
                entry.action_count = max(entry.action_count, len(content.value))

    return sorted(
        (entry for entry in entries.values() if entry.title),
        key=lambda entry: entry.sequence,
    )
