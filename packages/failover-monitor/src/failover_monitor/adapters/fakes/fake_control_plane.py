"""Fake control plane for testing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DirectiveCall:
    """Record of a single directive.

    Attributes:
        directive: One of "promote", "standby", "activate".
        base_url: Instance the directive was sent to.
    """

    directive: str
    base_url: str


class FakeControlPlane:
    """Fake implementation of ControlPlanePort recording every directive.

    set_delivering(False) makes every directive report non-delivery, the
    way the real adapter does after its attempts are exhausted.
    """

    def __init__(self) -> None:
        self._calls: list[DirectiveCall] = []
        self._delivering = True

    def promote(self, base_url: str) -> bool:
        return self._record("promote", base_url)

    def demote_to_standby(self, base_url: str) -> bool:
        return self._record("standby", base_url)

    def activate(self, base_url: str) -> bool:
        return self._record("activate", base_url)

    def _record(self, directive: str, base_url: str) -> bool:
        self._calls.append(DirectiveCall(directive=directive, base_url=base_url))
        return self._delivering

    def set_delivering(self, delivering: bool) -> None:
        """Choose whether directives report delivery."""
        self._delivering = delivering

    @property
    def calls(self) -> list[DirectiveCall]:
        """Return a copy of all recorded directives in order."""
        return list(self._calls)

    def clear_calls(self) -> None:
        """Clear the recorded directives."""
        self._calls.clear()
