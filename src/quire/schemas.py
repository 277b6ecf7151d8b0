"""Pydantic schemas for graph file validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from quire.models import EntityKind


class EntitySchema(BaseModel):
    """Schema for one entity and its nested children."""

    id: str | None = None
    kind: EntityKind
    name: str
    description: str | None = None
    readme: str | None = None
    relevance_boost: float | None = None
    group: str | None = None
    category: str | None = None
    flags: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)
    children: list[EntitySchema] = Field(default_factory=list)

    @field_validator("flags", "tags", "references", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Ensure value is a list."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        """Accept 'Type Alias', 'type-alias' and 'type_alias' alike."""
        if isinstance(v, str):
            return v.strip().lower().replace("-", "_").replace(" ", "_")
        return v


class ProjectSchema(BaseModel):
    """Schema for the project (root entity) section."""

    name: str
    readme: str | None = None
    description: str | None = None


class GraphSchema(BaseModel):
    """Schema for the entire graph file."""

    project: ProjectSchema
    entities: list[EntitySchema] = Field(default_factory=list)


EntitySchema.model_rebuild()
