"""Development fallback guard strategies.

The placeholder-aware strategy recognises backend addresses that are known
not to host a working backend (template deploy URLs and the local default).
The always-real strategy is selected by USE_REAL_CONTENT_DATA for
environments that intentionally run a backend on one of those addresses.
"""

from bankim_portal.config import Settings

DEFAULT_PLACEHOLDER_PATTERNS: tuple[str, ...] = (
    "your-api-domain.railway.app",
    "your-backend-domain.railway.app",
    "localhost:3001",
)


class AlwaysRealGuard:
    """Never treats a target as a placeholder."""

    def is_placeholder_target(self, base_address: str) -> bool:
        return False


class PlaceholderAwareGuard:
    """Treats addresses containing a known placeholder pattern as non-functional."""

    def __init__(self, patterns: tuple[str, ...] = DEFAULT_PLACEHOLDER_PATTERNS) -> None:
        self._patterns = patterns

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def is_placeholder_target(self, base_address: str) -> bool:
        return any(pattern in base_address for pattern in self._patterns)


def build_fallback_guard(settings: Settings) -> AlwaysRealGuard | PlaceholderAwareGuard:
    """Pick the guard strategy for the configured environment."""
    if settings.use_real_content_data:
        return AlwaysRealGuard()
    return PlaceholderAwareGuard()
