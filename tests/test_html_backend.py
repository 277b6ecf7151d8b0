"""Tests for the HTML backend and the plugins that accompany it."""

from __future__ import annotations

import asyncio
from io import StringIO
from pathlib import Path
from typing import Any

import pytest

from quire.backends.html import HtmlBackend, HtmlRenderContext
from quire.config import OutputTarget, RenderOptions
from quire.logger import setup_logger
from quire.models import Entity, EntityKind
from quire.parser import load_project
from quire.plugins.payload import decode_payload
from quire.renderer import Renderer, RenderResult
from tests.conftest import entity, project


def render_site(root: Entity, out: Path, **options: Any) -> tuple[Renderer, RenderResult]:
    renderer = Renderer(RenderOptions(**options))
    result = asyncio.run(renderer.write_output(root, OutputTarget(path=out)))
    return renderer, result


def read_script(path: Path) -> Any:
    """Decode a ``window.x = "payload";`` script written by a plugin."""
    text = path.read_text(encoding="utf-8")
    payload = text.split('"')[1]
    return decode_payload(payload)


@pytest.fixture
def site(graph_file: Path, tmp_path: Path) -> Path:
    """The fixture graph rendered with default HTML options."""
    out = tmp_path / "site"
    _, result = render_site(
        load_project(graph_file), out, visibility_filters={"private": True}
    )
    assert result.ok
    return out


class TestPages:
    """Test the pages written for the fixture graph."""

    def test_documents_and_assets_written(self, site: Path) -> None:
        """Test every routed document and both asset files exist."""
        expected = [
            "index.html",
            "modules/core.html",
            "classes/core.Parser.html",
            "functions/core.parse.html",
            "interfaces/core.Options.html",
            "modules/util.html",
            "variables/util.VERSION.html",
            "types/util.Callback.html",
            "assets/style.css",
            "assets/main.js",
            "assets/navigation.js",
            "assets/search.js",
        ]
        for name in expected:
            assert (site / name).is_file(), name

    def test_readme_index(self, site: Path) -> None:
        """Test the readme becomes the index page with anchored headings."""
        html = (site / "index.html").read_text()

        assert '<a id="md:welcome" class="quire-anchor"></a><h1>Welcome</h1>' in html
        assert 'id="md:usage"' in html
        assert '<a href="#md:usage">Usage</a>' in html
        assert '<html lang="en">' in html

    def test_member_anchors_and_references(self, site: Path) -> None:
        """Test inline members get anchors and references link relative to the page."""
        html = (site / "classes" / "core.Parser.html").read_text()

        assert 'id="parse"' in html
        assert 'id="parse.text"' in html
        assert 'id="constructor"' in html
        assert '<a href="../functions/core.parse.html">parse</a>' in html
        assert '<a href="#parse.text">text</a>' in html

    def test_asset_links_relative(self, site: Path) -> None:
        """Test asset links and the base url depend on page depth."""
        index = (site / "index.html").read_text()
        nested = (site / "classes" / "core.Parser.html").read_text()

        assert 'href="assets/style.css"' in index
        assert 'data-base="./"' in index
        assert 'href="../assets/style.css"' in nested
        assert 'data-base="../"' in nested

    def test_breadcrumbs(self, site: Path) -> None:
        """Test ancestors are linked from the page heading."""
        html = (site / "classes" / "core.Parser.html").read_text()

        assert '<a href="../index.html">Demo</a>' in html
        assert '<a href="../modules/core.html">core</a>' in html
        assert "Class Parser</h1>" in html

    def test_code_highlighted(self, site: Path) -> None:
        """Test fenced code in descriptions is highlighted by pygments."""
        html = (site / "classes" / "core.Parser.html").read_text()
        css = (site / "assets" / "style.css").read_text()

        assert 'class="highlight"' in html
        assert "<em>things</em>" in html
        assert ".highlight" in css

    def test_visibility_classes(self, site: Path) -> None:
        """Test flags named in the visibility filters become CSS classes."""
        module = (site / "modules" / "core.html").read_text()
        page = (site / "interfaces" / "core.Options.html").read_text()

        assert '<li class="quire-is-private"><a href="../interfaces/core.Options.html"' in module
        assert '<h1 class="quire-is-private">' in page

    def test_index_groups(self, site: Path) -> None:
        """Test a module page lists its documents under plural kind labels."""
        html = (site / "modules" / "core.html").read_text()

        assert ">Classes</h3>" in html
        assert ">Functions</h3>" in html
        assert ">Interfaces</h3>" in html


class TestPlugins:
    """Test the navigation, search and asset plugins."""

    def test_navigation_script(self, site: Path) -> None:
        """Test the navigation tree lists containers with their documents."""
        navigation = read_script(site / "assets" / "navigation.js")

        assert [node["text"] for node in navigation] == ["core", "util"]
        core = navigation[0]
        assert core["path"] == "modules/core.html"
        assert core["kind"] == "module"
        children = {child["text"]: child for child in core["children"]}
        assert children["Parser"]["path"] == "classes/core.Parser.html"
        assert children["Options"]["class"] == "quire-is-private"
        assert "children" not in children["Parser"]

    def test_search_script(self, site: Path) -> None:
        """Test the search index skips zero-boost entities and records parents."""
        rows = read_script(site / "assets" / "search.js")["rows"]
        by_url = {row["url"]: row for row in rows}

        assert "variables/util.VERSION.html" not in by_url
        assert by_url["classes/core.Parser.html#parse"]["parent"] == "core.Parser"
        assert by_url["classes/core.Parser.html"]["kind"] == "class"
        assert "parent" not in by_url["modules/core.html"]
        assert all("comment" not in row for row in rows)

    def test_search_comments(self, graph_file: Path, tmp_path: Path) -> None:
        """Test descriptions are indexed when requested."""
        out = tmp_path / "site"
        render_site(load_project(graph_file), out, search_in_comments=True)

        rows = read_script(out / "assets" / "search.js")["rows"]
        comments = {row["name"]: row.get("comment") for row in rows if row["kind"] == "function"}
        assert comments == {"parse": "Parse a string."}

    def test_custom_css(self, graph_file: Path, tmp_path: Path) -> None:
        """Test custom CSS is appended to the stylesheet."""
        css_file = tmp_path / "extra.css"
        css_file.write_text(".extra { color: red; }")
        out = tmp_path / "site"

        render_site(load_project(graph_file), out, custom_css=css_file)

        assert ".extra { color: red; }" in (out / "assets" / "style.css").read_text()

    def test_missing_custom_css_logged(self, graph_file: Path, tmp_path: Path) -> None:
        """Test a missing custom CSS file is reported without failing the run."""
        stream = StringIO()
        setup_logger(0, stream=stream)
        missing = tmp_path / "missing.css"

        _, result = render_site(load_project(graph_file), tmp_path / "site", custom_css=missing)

        assert result.ok
        assert f"Custom CSS file {missing} does not exist." in stream.getvalue()

    def test_github_pages(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test .nojekyll and CNAME accompany the site."""
        out = tmp_path / "site"

        render_site(sample_project, out, github_pages=True, cname="docs.example.com")

        assert (out / ".nojekyll").is_file()
        assert (out / "CNAME").read_text() == "docs.example.com"


class TestOptions:
    """Test options that change page output."""

    def test_cache_bust(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test asset links carry the render start time when cache busting."""
        out = tmp_path / "site"

        render_site(sample_project, out, cache_bust=True)

        html = (out / "classes" / "core.Parser.html").read_text()
        assert 'href="../assets/style.css?cache=' in html
        # Page links are never cache busted
        assert 'href="../index.html"' in html

    def test_title_and_lang(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test the configured title and language appear on every page."""
        out = tmp_path / "site"

        render_site(sample_project, out, title="Demo Docs", html_lang="de")

        html = (out / "index.html").read_text()
        assert "<title>Demo Docs</title>" in html
        assert '<html lang="de">' in html

    def test_unknown_highlight_style(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test an unknown pygments style aborts the target."""
        _, result = render_site(sample_project, tmp_path / "site", highlight_style="no-such-style")

        assert result.error is not None
        assert "no-such-style" in result.error

    def test_structure_router(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test the HTML backend honours the configured router."""
        out = tmp_path / "site"

        render_site(sample_project, out, router="structure")

        html = (out / "core" / "Parser" / "Parser.html").read_text()
        assert 'href="../../assets/style.css"' in html
        assert '<a href="../parse/parse.html">parse</a>' in html

    def test_deprecated_member(self, tmp_path: Path) -> None:
        """Test deprecated members are struck through."""
        root = project(
            entity(
                "Widget",
                EntityKind.CLASS,
                entity("draw", EntityKind.METHOD, flags={"deprecated"}),
            )
        )
        out = tmp_path / "site"

        render_site(root, out)

        assert "<del>draw</del>" in (out / "classes" / "Widget.html").read_text()


class TestHooks:
    """Test insertion points and content hooks."""

    def test_insertion_point_output(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test listener output is placed at its insertion point unescaped."""
        renderer = Renderer()
        renderer.hooks.on("head.end", lambda ctx: '<meta name="generator" content="test">')
        renderer.hooks.on("footer.begin", lambda ctx: f"<p>{ctx.document.path}</p>")
        out = tmp_path / "site"

        asyncio.run(renderer.write_output(sample_project, OutputTarget(path=out)))

        html = (out / "classes" / "core.Parser.html").read_text()
        assert '<meta name="generator" content="test">\n</head>' in html
        assert "<p>classes/core.Parser.html</p>" in html

    def test_parse_markdown_listener(self, sample_project: Entity, tmp_path: Path) -> None:
        """Test parseMarkdown listeners can rewrite converted markdown."""
        renderer = Renderer()

        def rewrite(event: Any) -> None:
            event.parsed_text = event.parsed_text.replace("things", "widgets")

        renderer.hooks.on("parseMarkdown", rewrite)
        out = tmp_path / "site"

        asyncio.run(renderer.write_output(sample_project, OutputTarget(path=out)))

        assert "<em>widgets</em>" in (out / "classes" / "core.Parser.html").read_text()


class TestContext:
    """Test the template context helpers directly."""

    def test_index_groups_use_group_labels(self, tmp_path: Path) -> None:
        """Test explicit groups override the kind label."""
        root = project(
            entity("Alpha", EntityKind.CLASS, group="Widgets"),
            entity("Beta", EntityKind.CLASS),
            entity("Gamma", EntityKind.FUNCTION),
        )
        renderer = Renderer()
        backend = HtmlBackend(renderer, RenderOptions())
        router = backend.build_router(tmp_path)
        documents = router.build_documents(root)
        context = HtmlRenderContext(backend, router, documents[0])

        groups = [(label, [e.name for e in members]) for label, members in context.index_groups(root)]

        assert groups == [("Widgets", ["Alpha"]), ("Classes", ["Beta"]), ("Functions", ["Gamma"])]

    def test_entity_classes_from_tags(self, tmp_path: Path) -> None:
        """Test tags need an @-prefixed filter to become classes."""
        beta = entity("Beta", EntityKind.CLASS, tags=["beta"], flags={"internal"})
        renderer = Renderer()
        backend = HtmlBackend(
            renderer, RenderOptions(visibility_filters={"@beta": True, "internal": False})
        )

        assert backend.get_entity_classes(beta) == "quire-is-internal quire-is-beta"
