"""Domain entities for internal representation.

These are plain dataclasses used internally by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cache_entry import CacheEntryEntity
from .content_entry import (
    AggregatedContentEntry,
    AggregationDefaults,
    ContentKind,
    ContentMetadata,
    ContentStatus,
)
from .execution_result import ExecutionOutcome, ExecutionResult

__all__ = [
    "AggregatedContentEntry",
    "AggregationDefaults",
    "CacheEntryEntity",
    "ContentKind",
    "ContentMetadata",
    "ContentStatus",
    "ExecutionOutcome",
    "ExecutionResult",
]
