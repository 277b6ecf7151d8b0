"""JSON backend: the whole graph and its addresses in one document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from quire.backends.base import create_router
from quire.exceptions import ConfigurationError
from quire.models import Entity
from quire.routers.base import Router

if TYPE_CHECKING:
    from quire.config import RenderOptions
    from quire.renderer import Renderer
    from quire.routers.base import Document

JSON_ROUTER = "single"


class JsonBackend:
    """Serialize the graph to a single JSON file written at the target path.

    Routing always uses the single-document router, whatever router the
    options name. Each entity carries its address within that one
    document (``""`` for the root, ``"#core.Parser"`` for the rest), so
    consumers can look entities up by anchor.
    """

    def __init__(self, renderer: Renderer, options: RenderOptions) -> None:
        self.renderer = renderer
        self.options = options
        self.router: Router | None = None

    async def setup(self, renderer: Renderer) -> None:
        pass

    async def teardown(self, renderer: Renderer) -> None:
        pass

    def build_router(self, base_path: Path) -> Router:
        self.router = create_router(self.renderer, self.options, router=JSON_ROUTER, extension=".json")
        return self.router

    def render(self, document: Document) -> str:
        if self.router is None:
            raise ConfigurationError("The JSON backend has no router; call build_router first")
        self.router.set_current_document(document)
        data = self.serialize(document.model)
        if self.options.pretty:
            return json.dumps(data, indent="\t", ensure_ascii=False) + "\n"
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    def serialize(self, entity: Entity) -> dict[str, Any]:
        """Convert an entity and its subtree to plain JSON data."""
        assert self.router is not None
        table = self.router.table
        data: dict[str, Any] = {"id": entity.id, "name": entity.name, "kind": entity.kind.value}

        url = table.resolve(entity)
        if url is not None:
            data["url"] = url
        anchor = table.anchor(entity)
        if anchor is not None:
            data["anchor"] = anchor

        optional: dict[str, Any] = {
            "readme": entity.readme,
            "description": entity.description,
            "relevanceBoost": entity.relevance_boost,
            "group": entity.group,
            "category": entity.category,
        }
        data.update({key: value for key, value in optional.items() if value is not None})

        if entity.flags:
            data["flags"] = sorted(entity.flags)
        if entity.tags:
            data["tags"] = list(entity.tags)
        if entity.references:
            data["references"] = [ref.id or ref.get_full_name() for ref in entity.references]
        if entity.children:
            data["children"] = [self.serialize(child) for child in entity.children]
        return data


def json_backend(renderer: Renderer, options: RenderOptions) -> JsonBackend:
    return JsonBackend(renderer, options)
