"""Markdown to HTML conversion for entity content blocks."""

from __future__ import annotations

import asyncio
import html
import re
from typing import TYPE_CHECKING, Any

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from quire.events import MarkdownEvent
from quire.exceptions import ConfigurationError
from quire.logger import get_logger
from quire.routers.base import PageHeading

if TYPE_CHECKING:
    from quire.hooks import HookRegistry
    from quire.routers.base import Document

HEADING_PREFIX = "md:"

_TAG = re.compile(r"<[^>]+>")
_SLUG_STRIP = re.compile(r"[^\w\s-]")
_SLUG_SPACE = re.compile(r"[\s_]+")


def slugify(text: str) -> str:
    """Create a URL-friendly slug from heading text.

    Args:
        text: Heading text, possibly containing inline HTML

    Returns:
        Lowercase slug with words separated by hyphens
    """
    plain = html.unescape(_TAG.sub("", text)).strip().lower()
    plain = _SLUG_STRIP.sub("", plain)
    return _SLUG_SPACE.sub("-", plain).strip("-")


class _QuireHTMLRenderer(mistune.HTMLRenderer):
    """HTML renderer that anchors headings and highlights fenced code."""

    def __init__(self, markup: MarkupRenderer) -> None:
        super().__init__(escape=False)
        self.markup = markup

    def heading(self, text: str, level: int, **attrs: Any) -> str:
        document = self.markup.current_document
        slug = slugify(text) or "heading"
        link = f"{HEADING_PREFIX}{slug}"
        if document is not None:
            taken = {heading.link for heading in document.page_headings}
            candidate, counter = link, 1
            while f"#{candidate}" in taken:
                candidate = f"{link}-{counter}"
                counter += 1
            link = candidate
            document.page_headings.append(
                PageHeading(link=f"#{link}", text=html.unescape(_TAG.sub("", text)), level=level)
            )
        return f'<a id="{link}" class="quire-anchor"></a><h{level}>{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        language = info.split()[0] if info and info.strip() else None
        highlighted = self.markup.highlight(code, language)
        if highlighted is not None:
            return highlighted
        escaped = html.escape(code)
        if language:
            return f'<pre><code class="language-{html.escape(language)}">{escaped}</code></pre>\n'
        return f"<pre><code>{escaped}</code></pre>\n"


class MarkupRenderer:
    """Convert markdown to HTML, firing ``parseMarkdown`` for every conversion.

    Syntax highlighting is only available after :meth:`load_highlighter` has
    completed; until then fenced code is emitted as escaped plain text.
    """

    def __init__(self, hooks: HookRegistry, highlight_style: str = "default") -> None:
        self.hooks = hooks
        self.highlight_style = highlight_style
        self.current_document: Document | None = None
        self._formatter: HtmlFormatter | None = None
        self._markdown = mistune.create_markdown(
            renderer=_QuireHTMLRenderer(self),
            plugins=["table", "strikethrough", "url"],
        )

    @property
    def highlighter_loaded(self) -> bool:
        return self._formatter is not None

    async def load_highlighter(self) -> None:
        """Load the pygments style off the event loop.

        Raises:
            ConfigurationError: If the configured style does not exist
        """
        if self._formatter is not None:
            return
        try:
            self._formatter = await asyncio.to_thread(
                HtmlFormatter, style=self.highlight_style, cssclass="highlight"
            )
        except ClassNotFound as e:
            raise ConfigurationError(
                f"Unknown highlight style '{self.highlight_style}': {e}"
            ) from e
        get_logger().detail(f"Loaded highlight style '{self.highlight_style}'")

    def release(self) -> None:
        """Drop the highlighter loaded by :meth:`load_highlighter`."""
        self._formatter = None

    def style_definitions(self) -> str:
        """CSS rules for highlighted code, empty if no highlighter is loaded."""
        if self._formatter is None:
            return ""
        return self._formatter.get_style_defs(".highlight")

    def highlight(self, code: str, language: str | None) -> str | None:
        """Highlight a code block, or return None if it cannot be highlighted."""
        if self._formatter is None or not language:
            return None
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            get_logger().debug(f"No lexer for language '{language}'")
            return None
        return highlight(code, lexer, self._formatter)

    def render(self, text: str, document: Document | None = None) -> str:
        """Convert markdown to HTML.

        Headings are recorded into ``document.page_headings`` when a document
        is given. Listeners on ``parseMarkdown`` may rewrite the result.
        """
        self.current_document = document
        try:
            parsed = self._markdown(text)
        finally:
            self.current_document = None
        event = MarkdownEvent(document=document, original_text=text, parsed_text=str(parsed))
        self.hooks.trigger(MarkdownEvent.PARSE, event)
        return event.parsed_text
