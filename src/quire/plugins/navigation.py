"""Writes the site navigation tree to ``assets/navigation.js``."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from quire.backends.base import NavigationProvider
from quire.events import RenderEvent
from quire.fs import write_file
from quire.logger import get_logger
from quire.plugins.payload import encode_payload, script_assignment

if TYPE_CHECKING:
    from quire.renderer import Renderer

NAVIGATION_SCRIPT = "assets/navigation.js"


class NavigationPlugin:
    """Serialize the backend's navigation tree for the client-side menu.

    The tree is encoded by a pre-render job and written once rendering has
    finished, so cleaning the output directory cannot remove it.
    """

    def __init__(self, renderer: Renderer) -> None:
        self.renderer = renderer
        self.payload: str | None = None
        renderer.hooks.on(RenderEvent.BEGIN, self.on_begin_render)
        renderer.hooks.on(RenderEvent.END, self.on_end_render)

    def on_begin_render(self, event: RenderEvent) -> None:
        self.payload = None
        if isinstance(self.renderer.backend, NavigationProvider):
            self.renderer.pre_render_jobs.append(self.build_navigation)

    async def build_navigation(self, event: RenderEvent) -> None:
        backend = self.renderer.backend
        assert isinstance(backend, NavigationProvider)
        elements = backend.get_navigation(event.root)
        data = [element.to_dict() for element in elements]
        self.payload = await asyncio.to_thread(encode_payload, data)
        get_logger().detail(f"Encoded navigation with {len(data)} top-level entries")

    def on_end_render(self, event: RenderEvent) -> None:
        if self.payload is None:
            return
        path = event.output_path / NAVIGATION_SCRIPT
        try:
            write_file(path, script_assignment("navigationData", self.payload))
        except OSError as e:
            get_logger().write_failed(path, e)
        finally:
            self.payload = None
