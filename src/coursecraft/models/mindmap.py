"""Course outline ("mindmap") tree models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MODULE_TITLE = "New Module"
COPY_SUFFIX = " (Copy)"


class Difficulty(str, Enum):
    """Module difficulty."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Position(BaseModel):
    """Canvas position. Cosmetic only."""

    x: float = 0.0
    y: float = 0.0


class MindMapNode(BaseModel):
    """A node of a course outline tree.

    The root node is the course itself; its descendants are modules. Nodes carry no parent
    pointer, so the tree is always navigated top-down from the root.

    Fields accept both snake_case names and the camelCase keys the generator emits
    (``estimatedHours``), and :meth:`to_payload` writes camelCase back out.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="ignore")

    id: str = Field(min_length=1)
    title: str
    description: str | None = None
    level: int = Field(default=0, ge=0)
    difficulty: Difficulty | None = None
    estimated_hours: float | None = Field(default=None, ge=0, alias="estimatedHours")
    skills: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    children: list["MindMapNode"] = Field(default_factory=list)
    position: Position | None = None

    @field_validator("skills", "prerequisites", "children", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "MindMapNode":
        """Build a tree from a structured payload's raw ``data`` object."""

        return cls.model_validate(data)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON shape used by the generator and the persistence layer."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
