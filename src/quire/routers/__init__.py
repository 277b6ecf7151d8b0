"""Routing strategies and the registry they are selected from."""

from quire.registry import NamedRegistry
from quire.routers.base import (
    AddressTable,
    Document,
    PageHeading,
    Router,
    RouterFactory,
    RoutingOptions,
    RoutingStrategy,
    make_alias,
)
from quire.routers.kind import KIND_DIRECTORIES, KindRouter, kind_dir_router, kind_router
from quire.routers.single import SingleDocumentRouter, single_router
from quire.routers.structure import StructureRouter, structure_router

DEFAULT_ROUTER = "kind"

RouterRegistry = NamedRegistry[RouterFactory]


def register_builtin_routers(registry: RouterRegistry) -> None:
    """Define the routers that ship with Quire."""
    registry.define("kind", kind_router)
    registry.define("kind-dir", kind_dir_router)
    registry.define("structure", structure_router)
    registry.define("single", single_router)


def create_router_registry() -> RouterRegistry:
    registry: RouterRegistry = NamedRegistry("router")
    register_builtin_routers(registry)
    return registry


__all__ = [
    "DEFAULT_ROUTER",
    "KIND_DIRECTORIES",
    "AddressTable",
    "Document",
    "KindRouter",
    "PageHeading",
    "Router",
    "RouterFactory",
    "RouterRegistry",
    "RoutingOptions",
    "RoutingStrategy",
    "SingleDocumentRouter",
    "StructureRouter",
    "create_router_registry",
    "make_alias",
    "register_builtin_routers",
]
