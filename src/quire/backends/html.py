"""HTML backend: Jinja2 page templates, markdown content and site navigation."""

from __future__ import annotations

import posixpath
from importlib.resources import files
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from quire.backends.base import create_router
from quire.exceptions import ConfigurationError
from quire.markup import MarkupRenderer
from quire.models import Entity
from quire.navigation import NavigationElement, build_navigation
from quire.routers.base import PageHeading, Router

if TYPE_CHECKING:
    from quire.config import RenderOptions
    from quire.renderer import Renderer
    from quire.routers.base import Document

TEMPLATE_SUFFIX = ".html.jinja2"


def default_template_dir() -> Path:
    """Templates shipped with the package."""
    return Path(str(files("quire.backends").joinpath("templates")))


class HtmlBackend:
    """Render each document as a standalone HTML page."""

    def __init__(
        self, renderer: Renderer, options: RenderOptions, template_dir: Path | None = None
    ) -> None:
        self.renderer = renderer
        self.options = options
        self.router: Router | None = None
        self.markup = MarkupRenderer(renderer.hooks, options.highlight_style)
        self.env = Environment(
            loader=FileSystemLoader(template_dir or default_template_dir()),
            autoescape=select_autoescape(["html", "jinja2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._navigation: list[NavigationElement] | None = None
        self._entity_classes: dict[Entity, str | None] = {}

    async def setup(self, renderer: Renderer) -> None:
        await self.markup.load_highlighter()

    async def teardown(self, renderer: Renderer) -> None:
        self.markup.release()
        self._navigation = None
        self._entity_classes.clear()

    def build_router(self, base_path: Path) -> Router:
        self.router = create_router(self.renderer, self.options, extension=".html")
        return self.router

    def render(self, document: Document) -> str:
        router = self._require_router()
        router.set_current_document(document)
        template = self.env.get_template(f"{document.template}{TEMPLATE_SUFFIX}")
        context = HtmlRenderContext(self, router, document)
        return template.render(
            ctx=context,
            model=document.model,
            project=document.root,
            options=self.options,
        )

    def get_entity_classes(self, entity: Entity) -> str | None:
        """CSS classes for an entity, driven by the visibility filters.

        A flag ``private`` yields ``quire-is-private`` when ``private`` is a
        visibility filter; a tag ``beta`` yields ``quire-is-beta`` when
        ``@beta`` is one.
        """
        if entity in self._entity_classes:
            return self._entity_classes[entity]

        filters = self.options.visibility_filters
        classes: list[str] = []
        for flag in sorted(entity.flags):
            if flag in filters:
                classes.append(f"quire-is-{_kebab(flag)}")
        for tag in entity.tags:
            if f"@{tag}" in filters:
                classes.append(f"quire-is-{_kebab(tag)}")

        result = " ".join(classes) or None
        self._entity_classes[entity] = result
        return result

    def get_navigation(self, root: Entity) -> list[NavigationElement]:
        """Navigation tree for the current run, built once and cached."""
        if self._navigation is None:
            self._navigation = build_navigation(
                root,
                self._require_router(),
                self.options.navigation,
                classes_for=self.get_entity_classes,
            )
        return self._navigation

    def _require_router(self) -> Router:
        if self.router is None:
            raise ConfigurationError("The HTML backend has no router; call build_router first")
        return self.router


def _kebab(text: str) -> str:
    return text.replace("_", "-").replace(" ", "-").lower()


class HtmlRenderContext:
    """Helpers exposed to templates as ``ctx`` while one document renders."""

    def __init__(self, backend: HtmlBackend, router: Router, document: Document) -> None:
        self.backend = backend
        self.router = router
        self.document = document

    @property
    def options(self) -> RenderOptions:
        return self.backend.options

    @property
    def base_url(self) -> str:
        """Relative path from the current document to the output root, with a trailing slash."""
        return posixpath.relpath(".", self.router.location or ".") + "/"

    def hook(self, name: str) -> Markup:
        """Concatenated output of every listener on an insertion point."""
        return Markup(self.backend.renderer.hooks.emit_text(name, self))

    def relative_url(self, absolute: str, cache_bust: bool = False) -> str:
        return self.router.relative_url(absolute, cache_bust)

    def url_to(self, entity: Entity) -> str | None:
        return self.router.url_to(entity)

    def anchor(self, entity: Entity) -> str | None:
        return self.router.table.anchor(entity)

    def owns_document(self, entity: Entity) -> bool:
        return self.router.table.owns_document(entity)

    def markdown(self, text: str | None) -> Markup:
        if not text:
            return Markup("")
        return Markup(self.backend.markup.render(text, self.document))

    def entity_classes(self, entity: Entity) -> str:
        return self.backend.get_entity_classes(entity) or ""

    def record_heading(self, entity: Entity) -> str:
        """Add an anchored member to the page sidebar; renders as nothing."""
        anchor = self.anchor(entity)
        if anchor is not None:
            self.document.page_headings.append(
                PageHeading(
                    link=f"#{anchor}",
                    text=entity.name,
                    kind=entity.kind,
                    classes=self.backend.get_entity_classes(entity),
                )
            )
        return ""

    def breadcrumbs(self, entity: Entity) -> list[tuple[str, str | None]]:
        """(name, relative url) pairs for the ancestors of ``entity``, root first."""
        crumbs: list[tuple[str, str | None]] = []
        node = entity.parent
        while node is not None:
            crumbs.append((node.name, self.url_to(node)))
            node = node.parent
        crumbs.reverse()
        return crumbs

    def index_groups(self, entity: Entity) -> list[tuple[str, list[Entity]]]:
        """Children that own a document, bucketed by group label or kind."""
        groups: dict[str, list[Entity]] = {}
        for child in entity.children:
            if self.owns_document(child):
                label = child.group or _plural(child.kind.label)
                groups.setdefault(label, []).append(child)
        return list(groups.items())

    def inline_members(self, entity: Entity) -> list[Entity]:
        """Children rendered as sections of the current document."""
        return [child for child in entity.children if not self.owns_document(child)]

    def headings(self) -> list[PageHeading]:
        return self.document.page_headings


def _plural(label: str) -> str:
    if label.endswith("s"):
        return f"{label}es"
    if label.endswith("y"):
        return f"{label[:-1]}ies"
    return f"{label}s"


def html_backend(renderer: Renderer, options: RenderOptions) -> HtmlBackend:
    return HtmlBackend(renderer, options)
