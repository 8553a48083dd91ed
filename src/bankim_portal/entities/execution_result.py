"""Outcome of a single executor call."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ExecutionOutcome(str, Enum):
    REVALIDATED = "revalidated"
    FETCHED = "fetched"
    STALE_FALLBACK = "stale_fallback"
    FAILED = "failed"


@dataclass(frozen=True)
class ExecutionResult:
    """Classified result of a request issued by the executor.

    Attributes:
        outcome: How the result was obtained
        data: Payload for successful outcomes
        error: Failure message for FAILED outcomes
        message: Optional message reported by the backend
        status_code: HTTP status when a response was received
    """

    outcome: ExecutionOutcome
    data: Any = None
    error: str | None = None
    message: str | None = None
    status_code: int | None = None

    @property
    def success(self) -> bool:
        return self.outcome is not ExecutionOutcome.FAILED
