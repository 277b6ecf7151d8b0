"""Output backends and the registry they are selected from."""

from quire.backends.base import (
    BackendFactory,
    EntityClassProvider,
    NavigationProvider,
    OutputBackend,
    create_router,
)
from quire.backends.html import HtmlBackend, html_backend
from quire.backends.json_output import JsonBackend, json_backend
from quire.backends.markdown import MarkdownBackend, markdown_backend
from quire.registry import NamedRegistry

DEFAULT_BACKEND = "html"

BackendRegistry = NamedRegistry[BackendFactory]


def register_builtin_backends(registry: BackendRegistry) -> None:
    """Define the backends that ship with Quire."""
    registry.define("html", html_backend)
    registry.define("markdown", markdown_backend)
    registry.define("json", json_backend)


__all__ = [
    "DEFAULT_BACKEND",
    "BackendFactory",
    "BackendRegistry",
    "EntityClassProvider",
    "HtmlBackend",
    "JsonBackend",
    "MarkdownBackend",
    "NavigationProvider",
    "OutputBackend",
    "create_router",
    "register_builtin_backends",
]
