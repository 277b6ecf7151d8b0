"""Event payloads passed through the hook registry during a render."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from quire import hooks

if TYPE_CHECKING:
    from quire.models import Entity
    from quire.routers.base import Document


@dataclass
class RenderEvent:
    """Fired once at the beginning and end of rendering one output target."""

    BEGIN: ClassVar[str] = hooks.BEGIN_RENDER
    END: ClassVar[str] = hooks.END_RENDER

    output_path: Path
    root: Entity
    documents: list[Document]


@dataclass
class PageEvent:
    """Fired before and after one document is rendered.

    ``contents`` is None during ``beginPage``; during ``endPage`` it holds the
    rendered output, and listeners may replace it before it is written.
    """

    BEGIN: ClassVar[str] = hooks.BEGIN_PAGE
    END: ClassVar[str] = hooks.END_PAGE

    document: Document
    url: str
    filename: Path
    contents: str | bytes | None = None

    @property
    def model(self) -> Entity:
        return self.document.model


@dataclass
class MarkdownEvent:
    """Fired whenever markdown is converted to HTML; listeners may rewrite ``parsed_text``."""

    PARSE: ClassVar[str] = hooks.PARSE_MARKDOWN

    document: Document | None
    original_text: str
    parsed_text: str
