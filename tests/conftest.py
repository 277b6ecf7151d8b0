"""Pytest configuration and fixtures for quire tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from quire import context
from quire.logger import reset_logger
from quire.models import Entity, EntityKind
from quire.routers import Document, Router, RoutingOptions, create_router_registry

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _reset_global_state() -> Iterator[None]:
    """Keep logger configuration and CLI context from leaking between tests."""
    yield
    reset_logger()
    context.set_config_path(None)
    context.set_verbosity(0)


def entity(name: str, kind: EntityKind, *children: Entity, **fields: Any) -> Entity:
    """Build an entity and attach children in order."""
    node = Entity(name=name, kind=kind, **fields)
    for child in children:
        node.add_child(child)
    return node


def project(*children: Entity, readme: str | None = None, name: str = "Demo") -> Entity:
    """Build a project root."""
    return entity(name, EntityKind.PROJECT, *children, readme=readme)


def route(root: Entity, router: str = "kind", **options: Any) -> tuple[Router, list[Document]]:
    """Route a graph with a fresh router and return it with the documents."""
    routing = RoutingOptions(**options)
    strategy = create_router_registry().get(router)(routing)
    instance = Router(strategy, unique_aliases=routing.unique_aliases)
    return instance, instance.build_documents(root)


def find(root: Entity, full_name: str) -> Entity:
    """Look up an entity by its dotted full name."""
    for node in root.walk():
        if not node.is_root and node.get_full_name() == full_name:
            return node
    raise KeyError(full_name)


@pytest.fixture
def sample_project() -> Entity:
    """A small library: two modules with classes, functions and members."""
    parse_fn = entity("parse", EntityKind.FUNCTION, description="Parse a string.")
    parse_method = entity(
        "parse",
        EntityKind.METHOD,
        entity("text", EntityKind.PARAMETER),
        references=[parse_fn],
    )
    parser = entity(
        "Parser",
        EntityKind.CLASS,
        entity("constructor", EntityKind.CONSTRUCTOR),
        parse_method,
        description="Parses *things*.",
    )
    core = entity(
        "core",
        EntityKind.MODULE,
        parser,
        parse_fn,
        entity("Options", EntityKind.INTERFACE, entity("strict", EntityKind.PROPERTY)),
        entity("Mode", EntityKind.ENUM, entity("Fast", EntityKind.ENUM_MEMBER)),
    )
    util = entity(
        "util",
        EntityKind.MODULE,
        entity("VERSION", EntityKind.VARIABLE),
        entity("Callback", EntityKind.TYPE_ALIAS),
    )
    return project(core, util)


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    """The fixture graph and its readme copied into a temporary directory."""
    for name in ("graph.yaml", "README.md"):
        (tmp_path / name).write_text((FIXTURES_DIR / name).read_text(encoding="utf-8"))
    return tmp_path / "graph.yaml"
