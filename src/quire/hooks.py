"""Named-channel hook registry with snapshot/restore scoping.

Every extension point in Quire is a named channel. Lifecycle events
(``beginRender``, ``beginPage``, ...) are fired with :meth:`HookRegistry.trigger`,
which ignores listener return values. Insertion points in page layouts
(``head.begin``, ``sidebar.end``, ...) are fired with :meth:`HookRegistry.emit`,
which collects the return values in subscription order so they can be
concatenated into the output.

Subscriptions can be scoped with :meth:`HookRegistry.snapshot` and
:meth:`HookRegistry.restore`: the renderer takes a snapshot before each page
and restores it afterwards, so hooks added while rendering one page never
leak into the next.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

HookCallback = Callable[..., Any]

# Lifecycle channels fired by the renderer
BEGIN_RENDER = "beginRender"
END_RENDER = "endRender"
BEGIN_PAGE = "beginPage"
END_PAGE = "endPage"
PARSE_MARKDOWN = "parseMarkdown"

# Insertion points available to page layouts
INSERTION_POINTS = (
    "head.begin",
    "head.end",
    "body.begin",
    "body.end",
    "content.begin",
    "content.end",
    "sidebar.begin",
    "sidebar.end",
    "pageSidebar.begin",
    "pageSidebar.end",
    "footer.begin",
    "footer.end",
)


@dataclass(frozen=True, slots=True)
class HookRegistration:
    """Registration entry for a hook listener."""

    order: int
    sequence: int
    callback: HookCallback


@dataclass(frozen=True)
class HookSnapshot:
    """Frozen copy of every channel's subscriber list."""

    channels: Mapping[str, tuple[HookRegistration, ...]]


class HookRegistry:
    """Map from channel name to an ordered list of subscribers."""

    def __init__(self) -> None:
        self._channels: dict[str, list[HookRegistration]] = {}
        self._sequence = 0

    def on(self, channel: str, callback: HookCallback, *, order: int = 0) -> HookCallback:
        """Subscribe a callback to a channel.

        Listeners run in ascending ``order``; listeners with equal order run in
        subscription order.

        Returns:
            The callback, so this can be used as a plain decorator call
        """
        self._sequence += 1
        registrations = self._channels.setdefault(channel, [])
        registrations.append(HookRegistration(order, self._sequence, callback))
        registrations.sort(key=lambda r: (r.order, r.sequence))
        return callback

    def off(self, channel: str, callback: HookCallback) -> None:
        """Remove every subscription of ``callback`` from a channel."""
        registrations = self._channels.get(channel)
        if not registrations:
            return
        self._channels[channel] = [r for r in registrations if r.callback is not callback]

    def has_listeners(self, channel: str) -> bool:
        return bool(self._channels.get(channel))

    def trigger(self, channel: str, *args: Any) -> None:
        """Call every listener on a channel, discarding return values."""
        # Copy so listeners may subscribe or unsubscribe while being called
        for registration in list(self._channels.get(channel, ())):
            registration.callback(*args)

    def emit(self, channel: str, *args: Any) -> list[Any]:
        """Call every listener on a channel and collect non-None results in order."""
        results: list[Any] = []
        for registration in list(self._channels.get(channel, ())):
            result = registration.callback(*args)
            if result is not None:
                results.append(result)
        return results

    def emit_text(self, channel: str, *args: Any) -> str:
        """Call every listener on a channel and concatenate their output."""
        return "".join(str(part) for part in self.emit(channel, *args))

    def snapshot(self) -> HookSnapshot:
        """Capture the current subscriptions so they can be restored later."""
        return HookSnapshot({name: tuple(regs) for name, regs in self._channels.items()})

    def restore(self, snapshot: HookSnapshot) -> None:
        """Drop every subscription made since ``snapshot`` was taken.

        Subscriptions removed since the snapshot are reinstated.
        """
        self._channels = {name: list(regs) for name, regs in snapshot.channels.items()}
