"""Site navigation tree built from the graph and a router's addresses."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from quire.config import NavigationOptions
from quire.models import CONTAINER_KINDS, Entity
from quire.routers.base import Router

DEFAULT_GROUP_LABEL = "Other"


def _default_elements() -> list[NavigationElement]:
    return []


@dataclass
class NavigationElement:
    """One node of the navigation tree.

    Label-only nodes (groups and categories) have no path or kind.
    """

    text: str
    path: str | None = None
    kind: str | None = None
    css_class: str | None = None
    children: list[NavigationElement] = field(default_factory=_default_elements)

    def to_dict(self) -> dict[str, Any]:
        """Compact form for the serialized navigation index."""
        data: dict[str, Any] = {"text": self.text}
        if self.path is not None:
            data["path"] = self.path
        if self.kind is not None:
            data["kind"] = self.kind
        if self.css_class:
            data["class"] = self.css_class
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def build_navigation(
    root: Entity,
    router: Router,
    options: NavigationOptions | None = None,
    classes_for: Callable[[Entity], str | None] | None = None,
) -> list[NavigationElement]:
    """Project the graph onto a navigation tree.

    Only entities that own a document appear. Containers (modules,
    namespaces) list their document-owning children; other documents are
    leaves.

    Args:
        root: Root of the routed graph
        router: Router that routed ``root``
        options: Grouping options
        classes_for: Optional callback returning CSS classes for an entity

    Returns:
        Top-level navigation elements
    """
    options = options or NavigationOptions()

    def element(entity: Entity) -> NavigationElement:
        node = NavigationElement(
            text=entity.name,
            path=router.resolve(entity),
            kind=entity.kind.value,
            css_class=classes_for(entity) if classes_for else None,
        )
        if entity.kind in CONTAINER_KINDS:
            node.children = children_of(entity)
        return node

    def children_of(entity: Entity) -> list[NavigationElement]:
        members = [child for child in entity.children if router.table.owns_document(child)]
        return _group(members, element, options)

    return children_of(root)


def _group(
    members: list[Entity],
    element: Callable[[Entity], NavigationElement],
    options: NavigationOptions,
) -> list[NavigationElement]:
    if options.include_groups and any(member.group for member in members):
        return _labelled(
            members,
            lambda member: member.group,
            lambda grouped: _group(
                grouped, element, NavigationOptions(include_categories=options.include_categories)
            ),
        )
    if options.include_categories and any(member.category for member in members):
        return _labelled(
            members,
            lambda member: member.category,
            lambda grouped: [element(member) for member in grouped],
        )
    return [element(member) for member in members]


def _labelled(
    members: list[Entity],
    label_of: Callable[[Entity], str | None],
    build: Callable[[list[Entity]], list[NavigationElement]],
) -> list[NavigationElement]:
    """Bucket members under label-only nodes, in first-seen order."""
    buckets: dict[str, list[Entity]] = {}
    for member in members:
        buckets.setdefault(label_of(member) or DEFAULT_GROUP_LABEL, []).append(member)
    return [NavigationElement(text=label, children=build(grouped)) for label, grouped in buckets.items()]
