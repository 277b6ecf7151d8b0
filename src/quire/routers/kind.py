"""Routers that group documents into one directory per entity kind."""

from __future__ import annotations

from quire.models import Entity, EntityKind
from quire.routers.base import (
    REFLECTION_TEMPLATE,
    AddressTable,
    Document,
    RoutingOptions,
    alias_chain,
    anchor_subtree,
    build_root_documents,
)

# Kinds that get their own document, and the directory they are written to
KIND_DIRECTORIES: dict[EntityKind, str] = {
    EntityKind.CLASS: "classes",
    EntityKind.INTERFACE: "interfaces",
    EntityKind.ENUM: "enums",
    EntityKind.NAMESPACE: "modules",
    EntityKind.MODULE: "modules",
    EntityKind.TYPE_ALIAS: "types",
    EntityKind.FUNCTION: "functions",
    EntityKind.VARIABLE: "variables",
}


class KindRouter:
    """Route document-worthy entities to ``<kind-dir>/<dotted.alias>.html``.

    With ``nested=True`` each document gets its own directory instead:
    ``<kind-dir>/<dotted.alias>/index.html``.
    """

    def __init__(
        self,
        options: RoutingOptions,
        directories: dict[EntityKind, str] | None = None,
        *,
        nested: bool = False,
    ) -> None:
        self.options = options
        self.directories = dict(KIND_DIRECTORIES if directories is None else directories)
        self.nested = nested

    def directory_for(self, entity: Entity) -> str | None:
        """Directory for a document-worthy entity, None for inline kinds."""
        return self.directories.get(entity.kind)

    def build(self, root: Entity, table: AddressTable) -> list[Document]:
        documents = build_root_documents(root, table, self.options)
        for child in root.children:
            self._route(child, root, table, documents)
        return documents

    def _route(
        self, entity: Entity, container: Entity, table: AddressTable, documents: list[Document]
    ) -> None:
        directory = self.directory_for(entity)
        if directory is None:
            anchor_subtree(entity, container, table)
            return

        chain = alias_chain(entity, table)
        if self.nested:
            path = f"{directory}/{chain}/index{self.options.extension}"
        else:
            path = f"{directory}/{chain}{self.options.extension}"
        table.assign_url(entity, path)
        documents.append(Document(path, REFLECTION_TEMPLATE, entity, container.root))

        for child in entity.children:
            self._route(child, entity, table, documents)


def kind_router(options: RoutingOptions) -> KindRouter:
    return KindRouter(options)


def kind_dir_router(options: RoutingOptions) -> KindRouter:
    return KindRouter(options, nested=True)
