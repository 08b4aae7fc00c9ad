"""Connector protocol — the presentation boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from navi.core import Navigator, NavView


@runtime_checkable
class Connector(Protocol):
    """Protocol that all presentation front-ends must implement."""

    @property
    def name(self) -> str: ...

    async def start(self, navigator: Navigator) -> None:
        """Attach to the navigator and run until the user quits."""
        ...

    async def stop(self) -> None:
        """Gracefully stop the connector."""
        ...

    def render(self, view: NavView) -> None:
        """Draw both axes. Called by the navigator after every transition."""
        ...
