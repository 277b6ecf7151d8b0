"""Router that mirrors the graph's container structure in the output tree."""

from __future__ import annotations

import posixpath

from quire.models import Entity, EntityKind
from quire.routers.base import (
    REFLECTION_TEMPLATE,
    AddressTable,
    Document,
    RoutingOptions,
    anchor_subtree,
    build_root_documents,
)
from quire.routers.kind import KIND_DIRECTORIES


class StructureRouter:
    """Route each document-worthy entity to ``<parent dirs>/<alias>/<alias>.html``.

    Every document gets its own directory nested inside the directory of the
    document that contains it, so the output tree follows the graph.
    """

    def __init__(self, options: RoutingOptions, kinds: frozenset[EntityKind] | None = None) -> None:
        self.options = options
        self.kinds = frozenset(KIND_DIRECTORIES) if kinds is None else kinds

    def build(self, root: Entity, table: AddressTable) -> list[Document]:
        documents = build_root_documents(root, table, self.options)
        for child in root.children:
            self._route(child, root, "", table, documents)
        return documents

    def _route(
        self,
        entity: Entity,
        container: Entity,
        directory: str,
        table: AddressTable,
        documents: list[Document],
    ) -> None:
        if entity.kind not in self.kinds:
            anchor_subtree(entity, container, table)
            return

        alias = table.alias(entity)
        own_directory = posixpath.join(directory, alias)
        path = f"{own_directory}/{alias}{self.options.extension}"
        table.assign_url(entity, path)
        documents.append(Document(path, REFLECTION_TEMPLATE, entity, container.root))

        for child in entity.children:
            self._route(child, entity, own_directory, table, documents)


def structure_router(options: RoutingOptions) -> StructureRouter:
    return StructureRouter(options)
