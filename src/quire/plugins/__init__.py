"""Built-in renderer plugins."""

from __future__ import annotations

from typing import TYPE_CHECKING

from quire.plugins.assets import AssetsPlugin
from quire.plugins.navigation import NavigationPlugin
from quire.plugins.search import SearchPlugin

if TYPE_CHECKING:
    from quire.renderer import Renderer


def register_builtin_plugins(renderer: Renderer) -> None:
    """Attach the plugins that ship with Quire to a renderer."""
    renderer.plugins = [
        NavigationPlugin(renderer),
        SearchPlugin(renderer),
        AssetsPlugin(renderer),
    ]


__all__ = ["AssetsPlugin", "NavigationPlugin", "SearchPlugin", "register_builtin_plugins"]
