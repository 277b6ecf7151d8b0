"""Routing abstractions: documents, address tables and the run-scoped router."""

from __future__ import annotations

import posixpath
import re
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Protocol

from quire.logger import get_logger
from quire.models import Entity, EntityKind

# Absolute external URLs are never rewritten
URL_PREFIX = re.compile(r"^(http|ftp)s?://")

_NON_WORD = re.compile(r"\W")

INDEX_TEMPLATE = "index"
REFLECTION_TEMPLATE = "reflection"


def make_alias(name: str) -> str:
    """Turn an entity name into a path/anchor-safe alias."""
    return _NON_WORD.sub("_", name)


def readme_enabled(readme: str | None, root: Entity) -> bool:
    """Decide whether the root gets a separate readme document.

    Args:
        readme: Configured readme mode. None means "present if the root has
            readme content"; any value ending in "none" disables the readme.
        root: Root of the graph being routed
    """
    if readme is None:
        return bool(root.readme)
    return not readme.endswith("none")


@dataclass
class RoutingOptions:
    """Options shared by every routing strategy."""

    readme: str | None = None
    extension: str = ".html"
    unique_aliases: bool = True
    filename: str = ""  # Only used by single-document routing


@dataclass
class PageHeading:
    """A heading collected while rendering a page, used for the page sidebar."""

    link: str
    text: str
    level: int | None = None
    kind: EntityKind | None = None
    classes: str | None = None


def _default_headings() -> list[PageHeading]:
    return []


@dataclass
class Document:
    """One unit of output, written to ``path`` below the target's output root."""

    path: str
    template: str
    model: Entity
    root: Entity
    page_headings: list[PageHeading] = field(default_factory=_default_headings)


class AddressTable:
    """Router-owned addresses for every entity in one routing pass.

    An entity either owns a document (it has a URL) or is anchored into the
    document of an ancestor (it has an owner and an anchor), never both.
    """

    def __init__(self, *, unique_aliases: bool = True) -> None:
        self.unique_aliases = unique_aliases
        self._urls: dict[Entity, str] = {}
        self._anchors: dict[Entity, tuple[Entity, str]] = {}
        self._aliases: dict[Entity, str] = {}
        # alias scope -> upper-cased claimed alias -> next suffix to try
        self._alias_counts: dict[Entity, dict[str, int]] = {}

    def assign_url(self, entity: Entity, url: str) -> None:
        self._anchors.pop(entity, None)
        self._urls[entity] = url

    def assign_anchor(self, entity: Entity, owner: Entity, anchor: str) -> None:
        self._urls.pop(entity, None)
        self._anchors[entity] = (owner, anchor)

    def url(self, entity: Entity) -> str | None:
        """URL of the document ``entity`` owns, or None if it is anchored."""
        return self._urls.get(entity)

    def anchor(self, entity: Entity) -> str | None:
        entry = self._anchors.get(entity)
        return entry[1] if entry else None

    def owner(self, entity: Entity) -> Entity | None:
        """The entity whose document contains ``entity``."""
        if entity in self._urls:
            return entity
        entry = self._anchors.get(entity)
        return entry[0] if entry else None

    def owns_document(self, entity: Entity) -> bool:
        return entity in self._urls

    def resolve(self, entity: Entity) -> str | None:
        """Absolute URL of an entity, including the anchor for attached entities."""
        url = self._urls.get(entity)
        if url is not None:
            return url
        entry = self._anchors.get(entity)
        if entry is None:
            return None
        owner, anchor = entry
        return f"{self._urls.get(owner, '')}#{anchor}"

    def entities(self) -> Iterator[Entity]:
        yield from self._urls
        yield from self._anchors

    def __contains__(self, entity: object) -> bool:
        return entity in self._urls or entity in self._anchors

    def __len__(self) -> int:
        return len(self._urls) + len(self._anchors)

    def alias(self, entity: Entity) -> str:
        """Stable alias for an entity, computed once per routing pass.

        Aliases are unique (case-insensitively) among entities that share the
        same nearest document-owning ancestor; later collisions get a numeric
        suffix in traversal order. With ``unique_aliases`` disabled the raw
        alias is returned and the last entity routed to a path wins.
        """
        cached = self._aliases.get(entity)
        if cached is not None:
            return cached

        alias = make_alias(entity.name) or f"entity-{len(self._aliases)}"
        if self.unique_aliases:
            claimed = self._claim(self._alias_scope(entity), alias)
            if claimed != alias:
                get_logger().debug(f"Alias collision for {entity.name!r}, using {claimed}")
            alias = claimed

        self._aliases[entity] = alias
        return alias

    def _claim(self, scope: Entity, alias: str) -> str:
        """Take the first free ``alias``, ``alias-1``, ``alias-2``... in ``scope``.

        Every claimed alias is recorded, so a suffixed or generated alias also
        blocks a later entity whose own name happens to match it.
        """
        counts = self._alias_counts.setdefault(scope, {})
        key = alias.upper()
        if key not in counts:
            counts[key] = 1
            return alias

        suffix = counts[key]
        while f"{key}-{suffix}" in counts:
            suffix += 1
        counts[key] = suffix + 1
        claimed = f"{alias}-{suffix}"
        counts[claimed.upper()] = 1
        return claimed

    def _alias_scope(self, entity: Entity) -> Entity:
        scope = entity.parent
        if scope is None:
            return entity
        while scope.parent is not None and scope not in self._urls:
            scope = scope.parent
        return scope


def alias_chain(entity: Entity, table: AddressTable, relative_to: Entity | None = None) -> str:
    """Dotted alias of ``entity`` and its ancestors, stopping at ``relative_to`` or the root."""
    url = table.alias(entity)
    parent = entity.parent
    if parent is not None and parent is not relative_to and not parent.is_root:
        url = f"{alias_chain(parent, table, relative_to)}.{url}"
    return url


def anchor_subtree(entity: Entity, container: Entity, table: AddressTable) -> None:
    """Anchor ``entity`` and everything below it into ``container``'s document."""
    table.assign_anchor(entity, container, alias_chain(entity, table, container))
    for child in entity.children:
        anchor_subtree(child, container, table)


def build_root_documents(
    root: Entity, table: AddressTable, options: RoutingOptions
) -> list[Document]:
    """Route the root entity.

    Without a readme the root is the index page. With a readme, the index page
    shows the readme; if every top-level child is a module the readme page is
    the only root page, otherwise the root's own listing moves to a separate
    ``modules`` page.
    """
    index = f"index{options.extension}"

    if not readme_enabled(options.readme, root):
        table.assign_url(root, index)
        return [Document(index, REFLECTION_TEMPLATE, root, root)]

    if all(child.kind is EntityKind.MODULE for child in root.children):
        table.assign_url(root, index)
        return [Document(index, INDEX_TEMPLATE, root, root)]

    listing = f"modules{options.extension}"
    table.assign_url(root, listing)
    return [
        Document(listing, REFLECTION_TEMPLATE, root, root),
        Document(index, INDEX_TEMPLATE, root, root),
    ]


class RoutingStrategy(Protocol):
    """Decides document boundaries and fills an address table."""

    def build(self, root: Entity, table: AddressTable) -> list[Document]:
        """Route the graph below ``root``.

        Returns:
            Documents in the order they should be rendered
        """
        ...


RouterFactory = Callable[[RoutingOptions], RoutingStrategy]
"""Type for router registry entries: (options) -> strategy"""


class Router:
    """Addressing state for one render run.

    Holds the address table built by a routing strategy and the "current
    document" used to compute relative links. A router is used by exactly one
    run and renders one document at a time.
    """

    def __init__(
        self,
        strategy: RoutingStrategy,
        *,
        unique_aliases: bool = True,
        cache_bust: bool = False,
        render_start_time: int | None = None,
    ) -> None:
        self.strategy = strategy
        self.table = AddressTable(unique_aliases=unique_aliases)
        self.cache_bust = cache_bust
        self.render_start_time = (
            render_start_time if render_start_time is not None else int(time.time() * 1000)
        )
        self.documents: list[Document] = []
        self._location = ""
        self._relative_cache: dict[tuple[str, str, bool], str] = {}

    def build_documents(self, root: Entity) -> list[Document]:
        """Route the graph and return the documents to render, in order."""
        self.documents = self.strategy.build(root, self.table)
        get_logger().debug(
            f"Routed {len(self.table)} entities into {len(self.documents)} documents"
        )
        return list(self.documents)

    @property
    def location(self) -> str:
        """Directory of the current document, '' for the output root."""
        return self._location

    def set_current_document(self, document: Document) -> None:
        self._location = posixpath.dirname(document.path)

    def resolve(self, entity: Entity) -> str | None:
        """Absolute URL of an entity, or None if it was not routed."""
        return self.table.resolve(entity)

    def url_to(self, entity: Entity) -> str | None:
        """URL of an entity relative to the current document."""
        absolute = self.table.resolve(entity)
        return self.relative_url(absolute) if absolute is not None else None

    def relative_url(self, absolute: str, cache_bust: bool = False) -> str:
        """Convert an output-root-relative URL into one relative to the current document.

        Args:
            absolute: URL relative to the output root, or an external URL
            cache_bust: Append a run-specific query string if cache busting is enabled
        """
        if URL_PREFIX.match(absolute):
            return absolute

        key = (self._location, absolute, cache_bust)
        cached = self._relative_cache.get(key)
        if cached is not None:
            return cached

        path, _, fragment = absolute.partition("#")
        if path:
            relative = posixpath.relpath(path, self._location or ".")
        else:
            relative = "" if fragment else "."
        if cache_bust and self.cache_bust:
            relative += f"?cache={self.render_start_time}"
        if fragment:
            relative = f"{relative}#{fragment}"

        self._relative_cache[key] = relative
        return relative
