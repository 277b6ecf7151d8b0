"""Markdown backend: one .md page per routed document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from quire.backends.base import create_router
from quire.exceptions import ConfigurationError
from quire.routers.base import INDEX_TEMPLATE, Router

if TYPE_CHECKING:
    from quire.config import RenderOptions
    from quire.models import Entity
    from quire.renderer import Renderer
    from quire.routers.base import Document


class MarkdownBackend:
    """Backend for generating a set of cross-linked markdown pages."""

    def __init__(self, renderer: Renderer, options: RenderOptions):
        """Initialize markdown backend.

        Args:
            renderer: Renderer running this backend
            options: Options of the target being rendered
        """
        self.renderer = renderer
        self.options = options
        self.router: Router | None = None
        self.lines: list[str] = []

    async def setup(self, renderer: Renderer) -> None:
        self.lines = []

    async def teardown(self, renderer: Renderer) -> None:
        self.lines = []

    def build_router(self, base_path: Path) -> Router:
        self.router = create_router(self.renderer, self.options, extension=".md")
        return self.router

    def render(self, document: Document) -> str:
        """Render one document as markdown."""
        if self.router is None:
            raise ConfigurationError("The markdown backend has no router; call build_router first")
        self.router.set_current_document(document)
        self.lines = []

        model = document.model
        if document.template == INDEX_TEMPLATE:
            self.lines.extend([model.readme or f"# {model.name}", ""])
            return self.finalize()

        self.add_breadcrumbs(model)
        title = model.name if model.is_root else f"{model.kind.label} {model.name}"
        self.lines.extend([f"# {title}", ""])
        if model.description:
            self.lines.extend([model.description.strip(), ""])

        self.add_index(model)
        for child in model.children:
            if not self.router.table.owns_document(child):
                self.add_member(child, level=2)
        return self.finalize()

    def add_breadcrumbs(self, entity: Entity) -> None:
        crumbs: list[str] = []
        node = entity.parent
        while node is not None:
            crumbs.append(self.format_reference(node))
            node = node.parent
        if crumbs:
            self.lines.extend([" / ".join(reversed(crumbs)), ""])

    def add_index(self, entity: Entity) -> None:
        """List the children of ``entity`` that have their own page, by kind."""
        assert self.router is not None
        by_kind: dict[str, list[Entity]] = {}
        for child in entity.children:
            if self.router.table.owns_document(child):
                by_kind.setdefault(child.group or child.kind.label, []).append(child)

        for label, children in by_kind.items():
            self.lines.extend([f"## {label}", ""])
            for child in children:
                self.lines.append(f"- {self.format_reference(child)}")
            self.lines.append("")

    def add_member(self, entity: Entity, level: int) -> None:
        """Render an anchored entity and its subtree as headed sections."""
        assert self.router is not None
        heading_prefix = "#" * min(level, 6)
        anchor = self.router.table.anchor(entity)
        name = f"~~{entity.name}~~" if entity.is_deprecated else entity.name
        if anchor:
            self.lines.append(f'<a id="{anchor}"></a>')
            self.lines.append("")
        self.lines.extend([f"{heading_prefix} {name}", ""])
        self.lines.extend([f"*{entity.kind.label}*", ""])

        if entity.description:
            self.lines.extend([entity.description.strip(), ""])

        if entity.references:
            refs = ", ".join(self.format_reference(ref) for ref in entity.references)
            self.lines.extend([f"See also: {refs}", ""])

        for child in entity.children:
            self.add_member(child, level + 1)

    def format_reference(self, entity: Entity) -> str:
        """Link to an entity relative to the current page, or its name if it has no address."""
        assert self.router is not None
        url = self.router.url_to(entity)
        if url is None:
            return f"`{entity.name}`"
        return f"[{entity.name}]({url})"

    def finalize(self) -> str:
        """Finalize and return the markdown document."""
        return "\n".join(self.lines).rstrip() + "\n"


def markdown_backend(renderer: Renderer, options: RenderOptions) -> MarkdownBackend:
    return MarkdownBackend(renderer, options)
