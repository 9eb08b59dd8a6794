"""Exception types raised by the editing pipeline.

The tree engine and the resolver raise these; :class:`coursecraft.editing.executor.CommandExecutor`
turns them into result values so nothing crosses into the host application.
"""

from __future__ import annotations


class CoursecraftError(Exception):
    """Base class for all coursecraft errors."""


class NodeNotFoundError(CoursecraftError):
    """A node referenced by title or ID does not exist in the tree."""

    def __init__(self, ref: str, *, role: str = "Module") -> None:
        self.ref = ref
        self.role = role
        super().__init__(f'{role} "{ref}" not found')


class StructureError(CoursecraftError):
    """A tree operation would break the tree's shape."""


class RootNodeError(StructureError):
    """An operation would remove or move the root node."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation} the root module")


class CycleError(StructureError):
    """A node would end up inside its own subtree."""

    def __init__(self, operation: str, node_id: str, target_id: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation} module {node_id!r} into its own subtree ({target_id!r})")


class CommandParseError(CoursecraftError):
    """No grammar rule matched an editing utterance."""

    def __init__(self, utterance: str, help_message: str) -> None:
        self.utterance = utterance
        self.help_message = help_message
        super().__init__(help_message)
