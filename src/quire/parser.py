"""Graph file parser: YAML (or JSON) into a linked entity graph."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from quire.exceptions import DuplicateIdError, MissingReferenceError, ParseError, ValidationError
from quire.logger import get_logger
from quire.models import Entity, EntityKind
from quire.schemas import EntitySchema, GraphSchema

README_SUFFIXES = (".md", ".markdown", ".txt")


def is_readme_path(value: str) -> bool:
    """True for values naming a readme file, as opposed to inline text or a mode."""
    return "\n" not in value and value.strip().lower().endswith(README_SUFFIXES)


class GraphParser:
    """Parser for graph files.

    Builds the entity tree, links parent pointers and resolves
    ``references`` by id once every entity is known.
    """

    def __init__(self) -> None:
        self.entities_by_id: dict[str, Entity] = {}
        self._pending_references: list[tuple[Entity, list[str]]] = []

    def parse_file(self, file_path: Path | str) -> Entity:
        """Parse a graph file into its root entity."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("Graph file must contain a dictionary at the root level")

        return self.parse_data(data, base_dir=path.parent)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any], base_dir: Path | None = None) -> Entity:
        """Build the graph from already-loaded data.

        Args:
            data: Graph file contents
            base_dir: Directory that relative readme paths are resolved against

        Raises:
            ValidationError: If the data does not match the graph schema
            DuplicateIdError: If two entities share an id
            MissingReferenceError: If a reference names an unknown id
        """
        try:
            schema = GraphSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid graph structure: {e}") from e

        self.entities_by_id = {}
        self._pending_references = []

        root = Entity(
            name=schema.project.name,
            kind=EntityKind.PROJECT,
            readme=self._load_readme(schema.project.readme, base_dir),
            description=schema.project.description,
        )
        for entity_schema in schema.entities:
            root.add_child(self._build(entity_schema, base_dir))

        self._resolve_references()
        get_logger().detail(
            f"Loaded {sum(1 for _ in root.walk()) - 1} entities for project '{root.name}'"
        )
        return root

    def _build(self, schema: EntitySchema, base_dir: Path | None) -> Entity:
        entity = Entity(
            name=schema.name,
            kind=schema.kind,
            id=schema.id or "",
            readme=self._load_readme(schema.readme, base_dir),
            description=schema.description,
            relevance_boost=schema.relevance_boost,
            group=schema.group,
            category=schema.category,
            flags=set(schema.flags),
            tags=list(schema.tags),
        )
        if entity.id:
            if entity.id in self.entities_by_id:
                raise DuplicateIdError(f"Duplicate entity ID: {entity.id}")
            self.entities_by_id[entity.id] = entity
        if schema.references:
            self._pending_references.append((entity, schema.references))

        for child_schema in schema.children:
            entity.add_child(self._build(child_schema, base_dir))
        return entity

    def _resolve_references(self) -> None:
        for entity, ids in self._pending_references:
            for ref_id in ids:
                target = self.entities_by_id.get(ref_id)
                if target is None:
                    raise MissingReferenceError(
                        f"Entity '{entity.id or entity.name}' references unknown entity '{ref_id}'"
                    )
                entity.references.append(target)

    def _load_readme(self, value: str | None, base_dir: Path | None) -> str | None:
        """Readme text: inline markdown, or the contents of a referenced file."""
        if value is None or not is_readme_path(value):
            return value
        return read_readme(value, base_dir)


def read_readme(value: str, base_dir: Path | None = None) -> str:
    """Read a readme file, relative to ``base_dir`` unless the path is absolute.

    Raises:
        ParseError: If the file cannot be read
    """
    path = Path(value.strip())
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(f"Could not read readme {path}: {e}") from e


def apply_readme_option(root: Entity, readme: str | None) -> None:
    """Replace the root's readme with the file named by the ``readme`` option.

    Values that aren't file paths (``None``, ``"none"``, ``"present"``) leave the
    root untouched; they only steer routing.
    """
    if readme is None or not is_readme_path(readme):
        return
    root.readme = read_readme(readme)
    get_logger().detail(f"Using readme {readme.strip()}")


def load_project(path: Path | str) -> Entity:
    """Load a graph file and return its root entity.

    Args:
        path: Path to the graph file

    Returns:
        The project entity, with every child linked to its parent

    Raises:
        ParseError: If the file cannot be read
        ValidationError: If the graph is invalid
    """
    return GraphParser().parse_file(path)
