#!/usr/bin/env python3
"""
Demo script for the BankIM portal client.

Walks through cached screen content, multilingual main page aggregation
and cache administration against the configured backend. With the default
API_URL (a local placeholder) every content call is answered from the
development payloads.
"""

import asyncio

from bankim_portal import ApiService
from bankim_portal.config import configure_logging, settings


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_screen_content(api: ApiService) -> None:
    """Fetch the same screen twice to show the cache path taken."""
    print_section("Screen Content")

    for attempt in (1, 2):
        response = await api.get_content_by_screen("main_page", settings.primary_language)
        if not response.success:
            print(f"  ✗ Attempt {attempt} failed: {response.error}")
            continue
        cache_status = response.cache_status.value if response.cache_status else "-"
        print(f"\n  Attempt {attempt}: {response.data.content_count} keys (cache: {cache_status})")

    first_keys = list(response.data.content)[:3] if response.success else []
    for key in first_keys:
        print(f"    {key}: {response.data.content[key].value}")


async def demo_main_page(api: ApiService) -> None:
    """Merge the main page actions across the configured languages."""
    print_section(f"Main Page ({', '.join(settings.content_languages)})")

    response = await api.get_all_main_page_languages()
    if not response.success:
        print(f"  ✗ {response.error}")
        return

    print(f"\n{'#':<4} {'Kind':<10} {'Title':<30} Languages")
    print("-" * 70)
    for entry in response.data:
        languages = ", ".join(sorted(entry.titles))
        print(f"{entry.sequence:<4} {entry.kind.value:<10} {entry.title:<30} {languages}")


def demo_cache_stats(api: ApiService) -> None:
    """Show and clear the content cache."""
    print_section("Content Cache")

    stats = api.get_cache_stats().data
    print(f"\n  Entries: {stats.size}")
    for entry in stats.entries:
        validator = "validator" if entry.has_validator else "no validator"
        print(f"    {entry.key[:60]}  age={entry.age_ms:.0f}ms  {validator}")

    cleared = api.clear_cache()
    print(f"\n  Cleared {cleared.data} entries")


async def main() -> None:
    """Run all demos."""
    configure_logging()

    print("\n🚀 BankIM Portal Client Demo")
    print("=" * 70)
    print(f"Backend: {settings.base_url} (content: {settings.content_base_url})")

    async with ApiService.create() as api:
        if api.uses_development_data:
            print("Backend address is a placeholder: using development data")

        await demo_screen_content(api)
        await demo_main_page(api)
        demo_cache_stats(api)

    print("\n" + "=" * 70)
    print("✅ Demo completed")
    print("=" * 70)


if __name__ == "__main__":
    asyncio.run(main())
