"""Copies the stylesheet and script used by HTML pages."""

from __future__ import annotations

from importlib.resources import files
from typing import TYPE_CHECKING

from quire.backends.html import HtmlBackend
from quire.events import RenderEvent
from quire.fs import write_file
from quire.logger import get_logger

if TYPE_CHECKING:
    from quire.renderer import Renderer


def _static(name: str) -> str:
    return files("quire").joinpath("static").joinpath(name).read_text(encoding="utf-8")


class AssetsPlugin:
    """Write ``assets/style.css`` and ``assets/main.js`` after HTML output is rendered.

    The stylesheet is the base styles, followed by the highlight style of the
    run and the contents of the ``custom_css`` file, if configured.
    """

    def __init__(self, renderer: Renderer) -> None:
        self.renderer = renderer
        renderer.hooks.on(RenderEvent.END, self.on_end_render)

    def on_end_render(self, event: RenderEvent) -> None:
        backend = self.renderer.backend
        if not isinstance(backend, HtmlBackend):
            return
        logger = get_logger()
        options = self.renderer.target_options

        parts = [_static("style.css"), backend.markup.style_definitions()]
        if options.custom_css is not None:
            if options.custom_css.is_file():
                parts.append(options.custom_css.read_text(encoding="utf-8"))
            else:
                logger.error(f"Custom CSS file {options.custom_css} does not exist.")

        assets = event.output_path / "assets"
        try:
            write_file(assets / "style.css", "\n".join(part for part in parts if part))
            write_file(assets / "main.js", _static("main.js"))
        except OSError as e:
            logger.error(f"Could not write assets to {assets}: {e}")
