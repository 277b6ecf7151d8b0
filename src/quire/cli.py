"""Command-line interface for Quire."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from . import context
from .backends import create_router
from .config import OutputTarget, QuireConfig, RenderOptions, discover_config
from .exceptions import QuireError
from .logger import setup_logger
from .models import Entity
from .parser import apply_readme_option, load_project
from .renderer import Renderer

DEFAULT_OUTPUT = Path("docs")

app = typer.Typer(
    name="quire",
    help="Quire - render documentation entity graphs to cross-linked HTML, Markdown and JSON",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=progress, 2=every document, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: quire_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for quire commands."""
    setup_logger(verbose)
    context.set_verbosity(verbose)
    context.set_config_path(config)


def _load(file: Path) -> tuple[Entity, QuireConfig]:
    """Load the graph and its configuration, exiting on errors."""
    try:
        root = load_project(file)
    except QuireError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    try:
        config = discover_config(file)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: Invalid config: {e}", err=True)
        raise typer.Exit(1) from e

    return root, config or QuireConfig()


def _apply_readme(root: Entity, readme: str | None) -> None:
    """Load a readme file named in the options into the root, exiting on errors."""
    try:
        apply_readme_option(root, readme)
    except QuireError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def render(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the graph YAML file")] = Path(
        "graph.yaml"
    ),
    *,
    out: Annotated[
        Path | None, typer.Option("--out", "-o", help="Output directory for the default backend")
    ] = None,
    json_file: Annotated[
        Path | None, typer.Option("--json", help="Also write the graph as JSON to this file")
    ] = None,
    markdown_dir: Annotated[
        Path | None, typer.Option("--markdown", help="Also write markdown pages to this directory")
    ] = None,
    backend: Annotated[
        str | None, typer.Option("--backend", "-b", help="Backend for --out (default: html)")
    ] = None,
    router: Annotated[
        str | None,
        typer.Option("--router", "-r", help="Routing strategy: kind, kind-dir, structure"),
    ] = None,
    clean: Annotated[
        bool | None,
        typer.Option("--clean/--no-clean", help="Empty output directories before writing"),
    ] = None,
    cache_bust: Annotated[
        bool, typer.Option("--cache-bust", help="Add a cache-busting query to asset links")
    ] = False,
    readme: Annotated[
        str | None,
        typer.Option("--readme", help="Readme mode; 'none' disables the readme page"),
    ] = None,
) -> None:
    """Render the graph to every configured output target."""
    root, config = _load(file)

    overrides: dict[str, object] = {}
    if backend is not None:
        overrides["backend"] = backend
    if router is not None:
        overrides["router"] = router
    if clean is not None:
        overrides["clean_output_dir"] = clean
    if cache_bust:
        overrides["cache_bust"] = True
    if readme is not None:
        overrides["readme"] = readme
    options = RenderOptions.model_validate({**config.options.model_dump(), **overrides})
    _apply_readme(root, options.readme)

    targets: list[OutputTarget] = []
    if out is not None:
        targets.append(OutputTarget(path=out))
    if json_file is not None:
        targets.append(OutputTarget(type="json", path=json_file))
    if markdown_dir is not None:
        targets.append(OutputTarget(type="markdown", path=markdown_dir))
    if not targets:
        targets = list(config.targets) or [OutputTarget(path=DEFAULT_OUTPUT)]

    renderer = Renderer(options)
    results = asyncio.run(renderer.write_outputs(root, targets))

    failed = False
    for result in results:
        if result.error is not None:
            typer.echo(f"Error: {result.target.path}: {result.error}", err=True)
            failed = True
        elif result.failed:
            typer.echo(
                f"Error: {len(result.failed)} documents could not be written to {result.target.path}",
                err=True,
            )
            failed = True
        else:
            typer.echo(f"Documentation written to {result.target.path}")

    if failed:
        raise typer.Exit(1)


@app.command()
def routes(
    file: Annotated[Path, typer.Argument(help="Path to the graph YAML file")] = Path(
        "graph.yaml"
    ),
    *,
    router: Annotated[
        str | None,
        typer.Option("--router", "-r", help="Routing strategy: kind, kind-dir, structure, single"),
    ] = None,
) -> None:
    """Show the documents and addresses a router produces, without writing anything."""
    root, config = _load(file)
    options = config.options
    _apply_readme(root, options.readme)

    renderer = Renderer(options)
    try:
        route_table = create_router(renderer, options, router=router)
    except QuireError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    documents = route_table.build_documents(root)

    typer.echo(f"Documents ({len(documents)}):")
    for document in documents:
        typer.echo(f"  {document.path or '<target>'}  [{document.template}]  {document.model.name}")

    # Anchored entities are listed from --verbose 1
    if context.get_verbosity() >= 1:
        typer.echo("Anchors:")
        for entity in root.walk():
            if entity in route_table.table and not route_table.table.owns_document(entity):
                typer.echo(f"  {entity.get_full_name()} -> {route_table.resolve(entity)}")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
