"""Resolution of human-readable node titles to node IDs."""

from __future__ import annotations

from typing import Any

from coursecraft.errors import NodeNotFoundError
from coursecraft.logging import get_logger
from coursecraft.models.command import MutationName, ParsedCommand
from coursecraft.models.mindmap import MindMapNode
from coursecraft.nlu.grammar import clean_span

logger = get_logger(__name__)


# parameter positions holding node titles, with the role used in "not found" messages
_NODE_PARAMS: dict[MutationName, tuple[tuple[int, str], ...]] = {
    MutationName.SET_TITLE: ((0, "Module"),),
    MutationName.SET_DESCRIPTION: ((0, "Module"),),
    MutationName.SET_DIFFICULTY: ((0, "Module"),),
    MutationName.SET_HOURS: ((0, "Module"),),
    MutationName.ADD_SKILL: ((0, "Module"),),
    MutationName.REMOVE_SKILL: ((0, "Module"),),
    MutationName.ADD_PREREQUISITE: ((0, "Module"),),
    MutationName.REMOVE_PREREQUISITE: ((0, "Module"),),
    MutationName.ADD_MODULE: ((0, "Parent module"),),
    MutationName.DELETE_MODULE: ((0, "Module"),),
    MutationName.DUPLICATE_MODULE: ((0, "Module"), (1, "Parent module")),
    MutationName.MOVE_MODULE: ((0, "Module"), (1, "Parent module")),
    MutationName.MERGE_MODULES: ((0, "Source module"), (1, "Target module")),
}


def find_id_by_title(tree: MindMapNode, title: str) -> str | None:
    """Depth-first pre-order search; case-insensitive; first match wins."""

    wanted = clean_span(title).lower()
    stack = [tree]
    while stack:
        node = stack.pop()
        if node.title.strip().lower() == wanted:
            return node.id
        stack.extend(reversed(node.children))
    return None


def resolve(tree: MindMapNode, title: str, *, role: str = "Module") -> str:
    """Return the ID of the first node titled ``title``.

    Raises:
        NodeNotFoundError: No node has that title.
    """

    node_id = find_id_by_title(tree, title)
    if node_id is None:
        raise NodeNotFoundError(title, role=role)
    return node_id


def resolve_parameters(command: ParsedCommand, tree: MindMapNode) -> list[Any]:
    """Replace the title arguments of ``command`` with node IDs.

    Optional references (a missing parent for add/duplicate) stay None. Course-level edits
    target the root implicitly and are returned unchanged.

    Raises:
        NodeNotFoundError: A referenced title does not exist.
    """

    params = list(command.parameters)
    for index, role in _NODE_PARAMS.get(command.mutation, ()):
        if index >= len(params) or params[index] is None:
            continue
        if isinstance(params[index], str):
            params[index] = resolve(tree, params[index], role=role)
    logger.debug("resolve_parameters: %s -> %s", command.parameters, params)
    return params
