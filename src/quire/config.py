"""Configuration loader for render options and output targets.

Settings live in a single ``quire_config.yaml`` file:

    options:
      router: kind
      clean_output_dir: true
      readme: README.md
    targets:
      - type: html
        path: docs
      - type: json
        path: docs/graph.json
        options:
          pretty: false
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from quire import context
from quire.parser import is_readme_path

CONFIG_FILENAME = "quire_config.yaml"


class NavigationOptions(BaseModel):
    """Controls how the navigation tree groups children."""

    include_categories: bool = False
    include_groups: bool = False


class RenderOptions(BaseModel):
    """Options consumed by the renderer, routers and backends."""

    backend: str = "html"
    router: str = "kind"
    clean_output_dir: bool = True
    cache_bust: bool = False
    # None uses the root's readme if it has one, "none" disables the readme page
    # and a .md/.markdown/.txt path replaces the root's readme with that file
    readme: str | None = None
    pretty: bool = True
    unique_aliases: bool = True
    title: str | None = None
    html_lang: str = "en"
    custom_css: Path | None = None
    github_pages: bool = False
    cname: str | None = None
    search_in_comments: bool = False
    visibility_filters: dict[str, bool] = Field(default_factory=dict)
    highlight_style: str = "default"
    navigation: NavigationOptions = NavigationOptions()

    def for_target(self, target: OutputTarget) -> RenderOptions:
        """Options for one target: the target's overrides and type win."""
        data = self.model_dump()
        data.update(target.options)
        if target.type:
            data["backend"] = target.type
        return RenderOptions.model_validate(data)


class OutputTarget(BaseModel):
    """One output to produce: a backend name and where to write it."""

    type: str | None = None  # None = options.backend
    path: Path
    options: dict[str, Any] = Field(default_factory=dict)


class QuireConfig(BaseModel):
    """Top-level configuration file contents."""

    options: RenderOptions = RenderOptions()
    targets: list[OutputTarget] = Field(default_factory=list[OutputTarget])


def load_config(config_path: Path | str) -> QuireConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to quire_config.yaml

    Returns:
        Parsed configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open() as f:
        data: dict[str, Any] | None = yaml.safe_load(f)

    if not data:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping")

    config = QuireConfig.model_validate(data)

    # Relative paths are relative to the config file, not the working directory
    base = config_path.parent
    for target in config.targets:
        if not target.path.is_absolute():
            target.path = base / target.path
    if config.options.custom_css and not config.options.custom_css.is_absolute():
        config.options.custom_css = base / config.options.custom_css
    readme = config.options.readme
    if readme and is_readme_path(readme) and not Path(readme.strip()).is_absolute():
        config.options.readme = str(base / readme.strip())

    return config


def discover_config(graph_path: Path | str, config_path: Path | None = None) -> QuireConfig | None:
    """Discover configuration from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Graph file directory / quire_config.yaml
    4. Current directory / quire_config.yaml

    Raises:
        FileNotFoundError: If an explicitly requested config file doesn't exist
    """
    # 1. Explicit argument
    if config_path:
        return load_config(config_path)

    # 2. Global context
    ctx_config = context.get_config_path()
    if ctx_config:
        return load_config(ctx_config)

    # 3. Graph file directory
    dir_config = Path(graph_path).parent / CONFIG_FILENAME
    if dir_config.exists():
        return load_config(dir_config)

    # 4. Current directory
    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return None
