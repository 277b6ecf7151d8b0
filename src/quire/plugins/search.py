"""Writes the client-side search index to ``assets/search.js``."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from quire.backends.base import EntityClassProvider, NavigationProvider
from quire.events import RenderEvent
from quire.fs import write_file
from quire.logger import get_logger
from quire.plugins.payload import encode_payload, script_assignment

if TYPE_CHECKING:
    from quire.renderer import Renderer
    from quire.routers.base import Router

SEARCH_SCRIPT = "assets/search.js"


def build_search_rows(
    event: RenderEvent,
    router: Router,
    classes: EntityClassProvider | None = None,
    *,
    include_comments: bool = False,
) -> list[dict[str, Any]]:
    """One row per addressed, non-external entity with a positive relevance boost."""
    rows: list[dict[str, Any]] = []
    for entity in event.root.walk():
        if entity.is_root or entity.is_external:
            continue
        boost = 1.0 if entity.relevance_boost is None else entity.relevance_boost
        if boost <= 0:
            continue
        url = router.resolve(entity)
        if url is None:
            continue

        row: dict[str, Any] = {"kind": entity.kind.value, "name": entity.name, "url": url}
        css = classes.get_entity_classes(entity) if classes is not None else None
        if css:
            row["classes"] = css
        if entity.parent is not None and not entity.parent.is_root:
            row["parent"] = entity.parent.get_full_name()
        if include_comments and entity.description:
            row["comment"] = entity.description
        rows.append(row)
    return rows


class SearchPlugin:
    """Build a search index for backends that produce browsable sites."""

    def __init__(self, renderer: Renderer) -> None:
        self.renderer = renderer
        self.payload: str | None = None
        renderer.hooks.on(RenderEvent.BEGIN, self.on_begin_render)
        renderer.hooks.on(RenderEvent.END, self.on_end_render)

    def on_begin_render(self, event: RenderEvent) -> None:
        self.payload = None
        if isinstance(self.renderer.backend, NavigationProvider):
            self.renderer.pre_render_jobs.append(self.build_index)

    async def build_index(self, event: RenderEvent) -> None:
        router = self.renderer.router
        assert router is not None
        backend = self.renderer.backend
        rows = build_search_rows(
            event,
            router,
            backend if isinstance(backend, EntityClassProvider) else None,
            include_comments=self.renderer.target_options.search_in_comments,
        )
        self.payload = await asyncio.to_thread(encode_payload, {"rows": rows})
        get_logger().detail(f"Indexed {len(rows)} entities for search")

    def on_end_render(self, event: RenderEvent) -> None:
        if self.payload is None:
            return
        path = event.output_path / SEARCH_SCRIPT
        try:
            write_file(path, script_assignment("searchData", self.payload))
        except OSError as e:
            get_logger().write_failed(path, e)
        finally:
            self.payload = None
