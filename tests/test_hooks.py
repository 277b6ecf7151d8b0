"""Tests for the hook registry."""

from __future__ import annotations

from typing import Any

from quire.hooks import INSERTION_POINTS, HookRegistry


class TestHookRegistry:
    """Test subscription, ordering and emission."""

    def test_trigger_calls_listeners_in_order(self) -> None:
        """Test listeners run in subscription order."""
        hooks = HookRegistry()
        calls: list[str] = []
        hooks.on("beginPage", lambda event: calls.append(f"a:{event}"))
        hooks.on("beginPage", lambda event: calls.append(f"b:{event}"))

        hooks.trigger("beginPage", "page")

        assert calls == ["a:page", "b:page"]

    def test_order_key_breaks_ties(self) -> None:
        """Test a lower order runs first regardless of subscription order."""
        hooks = HookRegistry()
        hooks.on("head.end", lambda ctx: "late", order=10)
        hooks.on("head.end", lambda ctx: "early", order=-1)
        hooks.on("head.end", lambda ctx: "middle")

        assert hooks.emit("head.end", None) == ["early", "middle", "late"]

    def test_emit_text_concatenates(self) -> None:
        """Test insertion point output is joined and None results are dropped."""
        hooks = HookRegistry()
        hooks.on("footer.begin", lambda ctx: "<p>one</p>")
        hooks.on("footer.begin", lambda ctx: None)
        hooks.on("footer.begin", lambda ctx: "<p>two</p>")

        assert hooks.emit_text("footer.begin", None) == "<p>one</p><p>two</p>"

    def test_unknown_channel_is_empty(self) -> None:
        """Test emitting on a channel without listeners is harmless."""
        hooks = HookRegistry()

        hooks.trigger("nothing")
        assert hooks.emit_text("nothing") == ""
        assert not hooks.has_listeners("nothing")

    def test_off(self) -> None:
        """Test removing a listener."""
        hooks = HookRegistry()
        calls: list[Any] = []
        listener = hooks.on("endRender", calls.append)

        hooks.off("endRender", listener)
        hooks.trigger("endRender", 1)

        assert calls == []

    def test_listener_may_subscribe_while_triggered(self) -> None:
        """Test subscriptions made during a trigger apply to the next one."""
        hooks = HookRegistry()
        calls: list[str] = []

        def first(_: object) -> None:
            calls.append("first")
            hooks.on("beginPage", lambda _: calls.append("added"))

        hooks.on("beginPage", first)
        hooks.trigger("beginPage", None)
        assert calls == ["first"]

        hooks.trigger("beginPage", None)
        assert calls == ["first", "first", "added"]

    def test_insertion_points(self) -> None:
        """Test every layout region has a begin and end point."""
        regions = {"head", "body", "content", "sidebar", "pageSidebar", "footer"}
        assert set(INSERTION_POINTS) == {f"{r}.{e}" for r in regions for e in ("begin", "end")}


class TestSnapshots:
    """Test snapshot/restore scoping."""

    def test_restore_drops_new_listeners(self) -> None:
        """Test listeners added after a snapshot disappear on restore."""
        hooks = HookRegistry()
        hooks.on("head.end", lambda ctx: "kept")
        snapshot = hooks.snapshot()

        hooks.on("head.end", lambda ctx: "temporary")
        hooks.on("body.end", lambda ctx: "temporary")
        hooks.restore(snapshot)

        assert hooks.emit("head.end", None) == ["kept"]
        assert not hooks.has_listeners("body.end")

    def test_restore_reinstates_removed_listeners(self) -> None:
        """Test listeners removed after a snapshot come back on restore."""
        hooks = HookRegistry()
        listener = hooks.on("head.end", lambda ctx: "kept")
        snapshot = hooks.snapshot()

        hooks.off("head.end", listener)
        hooks.restore(snapshot)

        assert hooks.emit("head.end", None) == ["kept"]

    def test_nested_snapshots(self) -> None:
        """Test page snapshots nest inside run snapshots."""
        hooks = HookRegistry()
        run = hooks.snapshot()
        hooks.on("x", lambda: "run")
        page = hooks.snapshot()
        hooks.on("x", lambda: "page")

        hooks.restore(page)
        assert hooks.emit("x") == ["run"]
        hooks.restore(run)
        assert hooks.emit("x") == []

    def test_snapshot_is_independent_of_later_changes(self) -> None:
        """Test a snapshot can be restored more than once."""
        hooks = HookRegistry()
        snapshot = hooks.snapshot()

        for _ in range(2):
            hooks.on("x", lambda: "temp")
            hooks.restore(snapshot)
            assert hooks.emit("x") == []
