"""
Root conftest.py for the failover-monitor test suite.

Pytest plugin that checks TRA (Test Responsibility Architecture) and Tier
markers and applies tier timeouts.

Usage:
    @pytest.mark.tier(1)
    @pytest.mark.tra("UseCase.FailoverStateMachine")
    def test_something():
        ...

Configuration:
    Set TRA_ENFORCE=1 to fail collection on missing or invalid markers
    (default "warn" only prints them). Set TRA_ENFORCE=0 to skip the check.
    Set TIER_TIMEOUT_MULTIPLIER to scale tier timeouts on slow machines.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.nodes import Item


VALID_TRA_PREFIXES = frozenset(
    [
        "Domain.Invariant.",
        "Domain.Policy.",
        "UseCase.",
        "Port.",
        "Adapter.",
        "Contract.",
    ]
)

# Tier timeout limits in seconds (0 = no limit)
TIER_TIMEOUTS: dict[int, float] = {
    0: 0.1,
    1: 2.0,
    2: 30.0,
    3: 300.0,
    4: 0,
}


def _get_tier(item: Item) -> int | None:
    """Extract tier level from item's markers."""
    for marker in item.iter_markers(name="tier"):
        if marker.args:
            tier = marker.args[0]
            if isinstance(tier, int) and 0 <= tier <= 4:
                return tier
    return None


def _marker_errors(items: list[Item]) -> list[str]:
    """Return one error per test with a missing or invalid tra/tier marker."""
    errors = []
    for item in items:
        if _get_tier(item) is None:
            errors.append(f"{item.nodeid}: missing or invalid @pytest.mark.tier()")

        tra_markers = list(item.iter_markers(name="tra"))
        if not tra_markers:
            errors.append(f"{item.nodeid}: missing @pytest.mark.tra('...')")
            continue

        # Class-level and function-level markers may both apply; the closest wins
        anchor = tra_markers[0].args[0] if tra_markers[0].args else ""
        if not isinstance(anchor, str) or not any(
            anchor.startswith(prefix) for prefix in VALID_TRA_PREFIXES
        ):
            errors.append(f"{item.nodeid}: invalid TRA anchor {anchor!r}")
    return errors


def _apply_tier_timeouts(items: list[Item]) -> None:
    """Apply timeout based on tier level if pytest-timeout is installed."""
    try:
        import pytest_timeout as _  # type: ignore[import-untyped]  # noqa: F401
    except ImportError:
        return

    multiplier = float(os.environ.get("TIER_TIMEOUT_MULTIPLIER", "1.0"))
    for item in items:
        tier = _get_tier(item)
        if tier is None or any(item.iter_markers(name="timeout")):
            continue
        timeout = TIER_TIMEOUTS.get(tier, 0)
        if timeout > 0:
            item.add_marker(pytest.mark.timeout(timeout * multiplier))


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(config: Config, items: list[Item]) -> None:
    """Check TRA and Tier markers at collection time."""
    enforce_mode = os.environ.get("TRA_ENFORCE", "warn")
    if enforce_mode != "0":
        errors = _marker_errors(items)
        if errors and enforce_mode == "warn":
            print("\nTRA/Tier marker warnings:")
            for error in errors:
                print(f"  {error}")
        elif errors:
            pytest.fail(
                "TRA/Tier marker errors:\n" + "\n".join(f"  - {e}" for e in errors),
                pytrace=False,
            )

    _apply_tier_timeouts(items)


@pytest.hookimpl(trylast=True)
def pytest_report_header(config: Config) -> str:
    """Add enforcement info to pytest header."""
    return f"TRA enforcement: {os.environ.get('TRA_ENFORCE', 'warn')}"
