"""Tests for the markdown backend."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from quire.config import OutputTarget, RenderOptions
from quire.models import Entity, EntityKind
from quire.parser import load_project
from quire.renderer import Renderer
from tests.conftest import entity, project


def render_markdown(root: Entity, out: Path, **options: Any) -> None:
    renderer = Renderer(RenderOptions(backend="markdown", **options))
    result = asyncio.run(renderer.write_output(root, OutputTarget(path=out)))
    assert result.ok


class TestMarkdownBackend:
    """Test markdown page output."""

    def test_index_lists_modules(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test the root page links each module by kind."""
        render_markdown(sample_project, tmp_path)

        assert (tmp_path / "index.md").read_text() == (
            "# Demo\n\n## Module\n\n- [core](modules/core.md)\n- [util](modules/util.md)\n"
        )

    def test_class_page(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test a class page has breadcrumbs, members, anchors and references."""
        render_markdown(sample_project, tmp_path)

        text = (tmp_path / "classes" / "core.Parser.md").read_text()
        lines = text.splitlines()
        assert lines[0] == "[Demo](../index.md) / [core](../modules/core.md)"
        assert "# Class Parser" in lines
        assert "Parses *things*." in lines
        assert '<a id="parse.text"></a>' in lines
        assert "### text" in lines
        assert "*Parameter*" in lines
        assert "See also: [parse](../functions/core.parse.md)" in lines

    def test_module_page_index(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test a module page links its documents relative to itself."""
        render_markdown(sample_project, tmp_path)

        text = (tmp_path / "modules" / "core.md").read_text()
        assert "## Class\n\n- [Parser](../classes/core.Parser.md)\n" in text
        assert "- [Mode](../enums/core.Mode.md)" in text

    def test_readme_index(self, graph_file: Path, tmp_path: Path) -> None:
        """Test the readme is written verbatim as the index page."""
        out = tmp_path / "md"
        render_markdown(load_project(graph_file), out)

        assert (out / "index.md").read_text().startswith("# Welcome\n")
        assert (out / "modules" / "core.md").is_file()

    def test_deprecated_member(self, tmp_path: Path) -> None:
        """Test deprecated members are struck through."""
        root = project(
            entity("Widget", EntityKind.CLASS, entity("draw", EntityKind.METHOD, flags={"deprecated"}))
        )

        render_markdown(root, tmp_path)

        assert "## ~~draw~~" in (tmp_path / "classes" / "Widget.md").read_text()

    def test_unrouted_reference(self, tmp_path: Path) -> None:
        """Test references to entities outside the graph render as code."""
        outside = entity("Elsewhere", EntityKind.CLASS)
        root = project(
            entity("Widget", EntityKind.CLASS, entity("draw", EntityKind.METHOD, references=[outside]))
        )

        render_markdown(root, tmp_path)

        assert "See also: `Elsewhere`" in (tmp_path / "classes" / "Widget.md").read_text()

    def test_kind_dir_router(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test links follow the configured router."""
        render_markdown(sample_project, tmp_path, router="kind-dir")

        text = (tmp_path / "classes" / "core.Parser" / "index.md").read_text()
        assert "[core](../../modules/core/index.md)" in text
