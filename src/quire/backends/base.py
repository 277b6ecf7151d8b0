"""Base abstractions for output backends."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from quire.routers.base import Router, RoutingOptions

if TYPE_CHECKING:
    from quire.config import RenderOptions
    from quire.models import Entity
    from quire.navigation import NavigationElement
    from quire.renderer import Renderer
    from quire.routers.base import Document


RenderOutput = str | bytes
"""Rendered contents of one document"""


class OutputBackend(Protocol):
    """Protocol for output backends.

    A backend is created for one render run. The renderer calls ``setup``,
    asks it for a router, renders each routed document through ``render`` and
    finally calls ``teardown``. Backends must point the router at the
    document they are rendering before resolving any links.
    """

    router: Router | None

    async def setup(self, renderer: Renderer) -> None:
        """Acquire backend-wide resources before routing."""
        ...

    async def teardown(self, renderer: Renderer) -> None:
        """Release everything acquired in ``setup``."""
        ...

    def build_router(self, base_path: Path) -> Router:
        """Create the router used for this run.

        Args:
            base_path: Output location of the target being rendered

        Raises:
            ConfigurationError: If the configured router is not defined
        """
        ...

    def render(self, document: Document) -> RenderOutput | Awaitable[RenderOutput]:
        """Render one document into its final contents."""
        ...


@runtime_checkable
class EntityClassProvider(Protocol):
    """Backends that tag entities with CSS classes."""

    def get_entity_classes(self, entity: Entity) -> str | None: ...


@runtime_checkable
class NavigationProvider(Protocol):
    """Backends that can build a site navigation tree."""

    def get_navigation(self, root: Entity) -> list[NavigationElement]: ...


BackendFactory = Callable[["Renderer", "RenderOptions"], OutputBackend]
"""Type for backend registry entries: (renderer, options) -> backend"""


def create_router(
    renderer: Renderer, options: RenderOptions, *, router: str | None = None, extension: str = ".html"
) -> Router:
    """Build a run-scoped router from the renderer's router registry.

    Args:
        renderer: Renderer whose router registry is consulted
        options: Options of the target being rendered
        router: Router name, defaults to ``options.router``
        extension: File extension for routed documents

    Raises:
        ConfigurationError: If the router name is not defined
    """
    factory = renderer.routers.get(router or options.router)
    routing = RoutingOptions(
        readme=options.readme, extension=extension, unique_aliases=options.unique_aliases
    )
    return Router(
        factory(routing),
        unique_aliases=options.unique_aliases,
        cache_bust=options.cache_bust,
        render_start_time=renderer.render_start_time,
    )
