"""Development fallback guard protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class FallbackGuard(Protocol):
    """Decides whether a backend address is a non-functional placeholder.

    When it is, the API service answers with deterministic development
    payloads instead of calling the network.
    """

    def is_placeholder_target(self, base_address: str) -> bool:
        """Check a backend base address.

        Args:
            base_address: Base URL the service would call

        Returns:
            True if calls to this address must be replaced by mock payloads
        """
        ...
