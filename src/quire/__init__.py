"""Quire - route and render documentation entity graphs."""

from quire.config import OutputTarget, QuireConfig, RenderOptions, load_config
from quire.exceptions import (
    ConfigurationError,
    DirectoryError,
    DuplicateIdError,
    MissingReferenceError,
    ParseError,
    QuireError,
    ValidationError,
)
from quire.hooks import HookRegistry
from quire.models import Entity, EntityKind
from quire.parser import load_project
from quire.renderer import Renderer, RenderResult
from quire.routers import Document, Router

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DirectoryError",
    "Document",
    "DuplicateIdError",
    "Entity",
    "EntityKind",
    "HookRegistry",
    "MissingReferenceError",
    "OutputTarget",
    "ParseError",
    "QuireConfig",
    "QuireError",
    "RenderOptions",
    "RenderResult",
    "Renderer",
    "Router",
    "ValidationError",
    "load_config",
    "load_project",
]
