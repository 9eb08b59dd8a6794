"""Mutation registry.

Maps the mutation names a parsed command can target to tree operations, so the executor can
dispatch commands generically and hosts can expose the same operations as LLM tools.
"""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, Field, ValidationError

from coursecraft.config import Settings
from coursecraft.errors import NodeNotFoundError, StructureError
from coursecraft.logging import get_logger
from coursecraft.models.command import ErrorKind, MutationName
from coursecraft.models.mindmap import MindMapNode
from coursecraft.tree import mutations

logger = get_logger(__name__)

TreeOperation = Callable[..., MindMapNode]


class MutationResult(BaseModel):
    """Result from running one tree operation."""

    success: bool = True
    document: MindMapNode | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class MutationTool:
    """A named tree operation.

    ``func`` takes the current tree first, then the command's (resolved) parameters.
    """

    name: MutationName
    func: TreeOperation
    description: str

    def execute(self, tree: MindMapNode, *args: Any) -> MutationResult:
        try:
            document = self.func(tree, *args)
        except NodeNotFoundError as exc:
            return MutationResult(success=False, error=str(exc), error_kind=ErrorKind.NOT_FOUND)
        except (StructureError, ValidationError, ValueError) as exc:
            logger.info("Mutation %s rejected: %s", self.name.value, exc)
            return MutationResult(success=False, error=str(exc), error_kind=ErrorKind.REJECTED)
        return MutationResult(success=True, document=document)

    def get_schema(self) -> dict[str, Any]:
        """Describe the operation's arguments (tree excluded)."""

        params = list(inspect.signature(self.func).parameters.values())[1:]
        properties: dict[str, Any] = {}
        required: list[str] = []
        for param in params:
            if param.kind in (inspect.Parameter.VAR_KEYWORD, inspect.Parameter.KEYWORD_ONLY):
                continue
            properties[param.name] = {"type": str(param.annotation) if param.annotation is not param.empty else "string"}
            if param.default is inspect.Parameter.empty:
                required.append(param.name)
        return {"type": "object", "properties": properties, "required": required}


class MutationRegistry:
    """Registry of tree operations keyed by mutation name."""

    def __init__(self) -> None:
        self._tools: dict[MutationName, MutationTool] = {}

    def register(self, tool: MutationTool) -> None:
        self._tools[tool.name] = tool
        logger.debug("Mutation registered: %s", tool.name.value)

    def register_function(self, name: MutationName, func: TreeOperation, description: str) -> None:
        """Register a plain function as a mutation.

        Args:
            name: Mutation name commands refer to.
            func: Operation taking the tree first.
            description: Short description for tool listings.
        """

        self.register(MutationTool(name=name, func=func, description=description))

    def get(self, name: MutationName) -> MutationTool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[dict[str, Any]]:
        return [
            {"name": tool.name.value, "description": tool.description, "schema": tool.get_schema()}
            for tool in self._tools.values()
        ]

    def execute(self, name: MutationName, tree: MindMapNode, args: list[Any]) -> MutationResult:
        """Run the mutation ``name`` on ``tree``.

        Returns:
            MutationResult; an unknown name yields ``success=False`` rather than an exception.
        """

        tool = self.get(name)
        if tool is None:
            available = ", ".join(n.value for n in self._tools)
            return MutationResult(
                success=False,
                error=f"Mutation '{name}' not found. Available mutations: {available}",
                error_kind=ErrorKind.REJECTED,
            )
        return tool.execute(tree, *args)


def build_registry(settings: Settings | None = None) -> MutationRegistry:
    """Create a registry holding every mutation the command grammar can target."""

    settings = settings or Settings()
    add_module = functools.partial(
        mutations.add_child,
        title=settings.default_module_title,
        difficulty=settings.new_module_difficulty,
        hours=settings.new_module_hours,
    )
    duplicate = functools.partial(mutations.duplicate_node, suffix=settings.copy_suffix)

    registry = MutationRegistry()
    entries: list[tuple[MutationName, TreeOperation, str]] = [
        (MutationName.SET_TITLE, mutations.set_title, "Rename a module"),
        (MutationName.SET_DESCRIPTION, mutations.set_description, "Change a module description"),
        (MutationName.SET_DIFFICULTY, mutations.set_difficulty, "Set a module's difficulty"),
        (MutationName.SET_HOURS, mutations.set_hours, "Set a module's estimated hours"),
        (MutationName.ADD_SKILL, mutations.add_skill, "Add a skill to a module"),
        (MutationName.REMOVE_SKILL, mutations.remove_skill, "Remove a skill from a module"),
        (MutationName.ADD_PREREQUISITE, mutations.add_prerequisite, "Add a prerequisite to a module"),
        (MutationName.REMOVE_PREREQUISITE, mutations.remove_prerequisite, "Remove a prerequisite from a module"),
        (MutationName.ADD_MODULE, add_module, "Add a module under a parent or the course root"),
        (MutationName.DELETE_MODULE, mutations.remove_node, "Delete a module and its sub-modules"),
        (MutationName.DUPLICATE_MODULE, duplicate, "Copy a module with all its sub-modules"),
        (MutationName.MOVE_MODULE, mutations.move_node, "Move a module under another module"),
        (MutationName.SET_COURSE_TITLE, mutations.set_course_title, "Rename the course"),
        (MutationName.SET_COURSE_DESCRIPTION, mutations.set_course_description, "Change the course description"),
        (MutationName.MERGE_MODULES, mutations.merge_nodes, "Merge one module into another"),
    ]
    for name, func, description in entries:
        registry.register_function(name, func, description)
    return registry
