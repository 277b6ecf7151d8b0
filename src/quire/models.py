"""Data models for documentation entity graphs."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class EntityKind(str, Enum):
    """Kinds of entities that can appear in a documentation graph."""

    PROJECT = "project"
    MODULE = "module"
    NAMESPACE = "namespace"
    ENUM = "enum"
    ENUM_MEMBER = "enum_member"
    VARIABLE = "variable"
    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    CONSTRUCTOR = "constructor"
    PROPERTY = "property"
    METHOD = "method"
    ACCESSOR = "accessor"
    SIGNATURE = "signature"
    PARAMETER = "parameter"
    TYPE_PARAMETER = "type_parameter"
    TYPE_ALIAS = "type_alias"
    REFERENCE = "reference"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'Type Alias'."""
        return self.value.replace("_", " ").title()


# Kinds whose children are listed in the navigation tree
CONTAINER_KINDS = frozenset({EntityKind.PROJECT, EntityKind.MODULE, EntityKind.NAMESPACE})


def _default_children() -> list[Entity]:
    return []


def _default_str_list() -> list[str]:
    return []


def _default_flags() -> set[str]:
    return set()


@dataclass(eq=False)
class Entity:
    """A node in the documentation graph.

    Entities compare and hash by identity, so routers can key their address
    tables on them without the graph carrying any routing state.
    """

    name: str
    kind: EntityKind
    id: str = ""
    children: list[Entity] = field(default_factory=_default_children)
    parent: Entity | None = field(default=None, repr=False)
    readme: str | None = None
    description: str | None = None
    relevance_boost: float | None = None
    group: str | None = None
    category: str | None = None
    flags: set[str] = field(default_factory=_default_flags)
    tags: list[str] = field(default_factory=_default_str_list)
    references: list[Entity] = field(default_factory=_default_children, repr=False)

    def add_child(self, child: Entity) -> Entity:
        """Attach a child entity and link its parent pointer.

        Returns:
            The child, for chaining in graph builders
        """
        child.parent = self
        self.children.append(child)
        return child

    @property
    def is_root(self) -> bool:
        """True for the entity at the top of the graph."""
        return self.parent is None

    @property
    def is_deprecated(self) -> bool:
        return "deprecated" in self.flags

    @property
    def is_external(self) -> bool:
        return "external" in self.flags

    @property
    def root(self) -> Entity:
        """The top of the graph this entity belongs to."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def walk(self) -> Iterator[Entity]:
        """Yield this entity and all descendants depth-first, in child order."""
        stack: list[Entity] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def get_full_name(self, separator: str = ".") -> str:
        """Dotted name from the first non-root ancestor down to this entity."""
        names: list[str] = []
        node: Entity | None = self
        while node is not None and not node.is_root:
            names.append(node.name)
            node = node.parent
        if not names:
            return self.name
        return separator.join(reversed(names))
