"""Tree mutation engine.

Every operation takes a course tree and returns a new tree; the input is never modified.
Nodes are located by ID through a top-down walk (nodes have no parent pointers), which is
fine for course outlines of tens to hundreds of nodes.
"""

from __future__ import annotations

from typing import Any, Iterator

from coursecraft.errors import CycleError, NodeNotFoundError, RootNodeError
from coursecraft.logging import get_logger
from coursecraft.models.mindmap import COPY_SUFFIX, DEFAULT_MODULE_TITLE, Difficulty, MindMapNode
from coursecraft.utils.ids import new_node_id

logger = get_logger(__name__)


_FIELD_ALIASES = {"estimatedHours": "estimated_hours"}
_EDITABLE_FIELDS = frozenset(
    {"title", "description", "level", "difficulty", "estimated_hours", "skills", "prerequisites", "position"}
)


# --- lookup ---------------------------------------------------------------------------------


def iter_nodes(tree: MindMapNode) -> Iterator[MindMapNode]:
    """Yield every node in depth-first pre-order."""

    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_node(tree: MindMapNode, node_id: str) -> MindMapNode | None:
    for node in iter_nodes(tree):
        if node.id == node_id:
            return node
    return None


def find_parent(tree: MindMapNode, node_id: str) -> MindMapNode | None:
    """Return the parent of ``node_id``; None for the root or an unknown ID."""

    for node in iter_nodes(tree):
        if any(child.id == node_id for child in node.children):
            return node
    return None


def _copy(tree: MindMapNode) -> MindMapNode:
    return tree.model_copy(deep=True)


def _require(tree: MindMapNode, node_id: str, role: str = "Module") -> MindMapNode:
    node = find_node(tree, node_id)
    if node is None:
        raise NodeNotFoundError(node_id, role=role)
    return node


def _detach(tree: MindMapNode, node_id: str) -> MindMapNode:
    parent = find_parent(tree, node_id)
    if parent is None:
        raise NodeNotFoundError(node_id)
    for index, child in enumerate(parent.children):
        if child.id == node_id:
            return parent.children.pop(index)
    raise NodeNotFoundError(node_id)


# --- generic operations ---------------------------------------------------------------------


def set_field(tree: MindMapNode, node_id: str, field: str, value: Any) -> MindMapNode:
    """Return a tree with one field of one node replaced.

    An unknown ``node_id`` is a silent miss: the returned tree equals the input.

    Raises:
        ValueError: ``field`` is not an editable node field (``id`` and ``children`` are not).
    """

    name = _FIELD_ALIASES.get(field, field)
    if name not in _EDITABLE_FIELDS:
        raise ValueError(f"Field {field!r} cannot be edited")

    new_tree = _copy(tree)
    node = find_node(new_tree, node_id)
    if node is None:
        logger.debug("set_field: node %s not found; tree unchanged", node_id)
        return new_tree
    setattr(node, name, value)
    return new_tree


def new_module(
    data: dict[str, Any] | None = None,
    *,
    title: str = DEFAULT_MODULE_TITLE,
    difficulty: Difficulty | str = Difficulty.BEGINNER,
    hours: float = 1.0,
) -> MindMapNode:
    """Build a fresh module with a new ID, defaults overridden by ``data``.

    A caller-supplied ``id`` is ignored so the new node can never collide with an existing one.
    """

    fields: dict[str, Any] = {
        "title": title,
        "level": 1,
        "difficulty": difficulty,
        "estimated_hours": hours,
        "skills": [],
        "prerequisites": [],
        "children": [],
    }
    for key, value in (data or {}).items():
        if key == "id" or value is None:
            continue
        fields[_FIELD_ALIASES.get(key, key)] = value
    return MindMapNode(id=new_node_id(), **fields)


def add_child(
    tree: MindMapNode,
    parent_id: str | None,
    data: dict[str, Any] | MindMapNode | None = None,
    **defaults: Any,
) -> MindMapNode:
    """Append a new module under ``parent_id`` (the root when None).

    Args:
        tree: Current tree.
        parent_id: Parent node ID, or None for the root.
        data: Partial node fields, or a ready node (which then keeps its own ID).
        **defaults: Forwarded to :func:`new_module` (``title``, ``difficulty``, ``hours``).

    Raises:
        NodeNotFoundError: ``parent_id`` is not in the tree.
    """

    new_tree = _copy(tree)
    parent = new_tree if parent_id is None else _require(new_tree, parent_id, role="Parent module")
    child = data.model_copy(deep=True) if isinstance(data, MindMapNode) else new_module(data, **defaults)
    parent.children.append(child)
    logger.debug("add_child: %s added under %s", child.id, parent.id)
    return new_tree


def remove_node(tree: MindMapNode, node_id: str) -> MindMapNode:
    """Drop a node and its whole subtree.

    Raises:
        RootNodeError: ``node_id`` is the root.
        NodeNotFoundError: ``node_id`` is not in the tree.
    """

    if node_id == tree.id:
        raise RootNodeError("delete")
    new_tree = _copy(tree)
    _detach(new_tree, node_id)
    return new_tree


def reorder_children(tree: MindMapNode, order: list[str]) -> MindMapNode:
    """Sort every children list by each child's position in ``order``.

    ``order`` is a flat list of IDs that may span several levels. Children missing from it sort
    after the listed ones and otherwise keep their relative order.
    """

    rank = {node_id: index for index, node_id in enumerate(order)}
    missing = len(order)
    new_tree = _copy(tree)
    for node in iter_nodes(new_tree):
        if len(node.children) > 1:
            node.children = sorted(node.children, key=lambda child: rank.get(child.id, missing))
    return new_tree


def _clone_with_fresh_ids(node: MindMapNode) -> MindMapNode:
    clone = node.model_copy(deep=True)
    for each in iter_nodes(clone):
        each.id = new_node_id()
    return clone


def duplicate_node(
    tree: MindMapNode,
    node_id: str,
    new_parent_id: str | None = None,
    *,
    suffix: str = COPY_SUFFIX,
) -> MindMapNode:
    """Deep-copy a subtree and insert the copy.

    The copy and every descendant get fresh IDs, and the copy's title gets ``suffix``. It goes
    under ``new_parent_id`` when given, else next to the original (under the root when the
    original is the root).

    Raises:
        NodeNotFoundError: ``node_id`` or ``new_parent_id`` is not in the tree.
    """

    new_tree = _copy(tree)
    original = _require(new_tree, node_id)
    clone = _clone_with_fresh_ids(original)
    clone.title = f"{original.title}{suffix}"

    if new_parent_id is not None:
        parent = _require(new_tree, new_parent_id, role="Parent module")
    else:
        parent = find_parent(new_tree, node_id) or new_tree
    parent.children.append(clone)
    logger.debug("duplicate_node: %s copied to %s under %s", node_id, clone.id, parent.id)
    return new_tree


def move_node(tree: MindMapNode, node_id: str, new_parent_id: str) -> MindMapNode:
    """Move a subtree, IDs unchanged, under another node.

    Raises:
        RootNodeError: ``node_id`` is the root.
        CycleError: ``new_parent_id`` lies inside the moved subtree.
        NodeNotFoundError: either ID is not in the tree.
    """

    if node_id == tree.id:
        raise RootNodeError("move")
    new_tree = _copy(tree)
    node = _require(new_tree, node_id)
    if find_node(node, new_parent_id) is not None:
        raise CycleError("move", node_id, new_parent_id)
    destination = _require(new_tree, new_parent_id, role="Parent module")
    _detach(new_tree, node_id)
    destination.children.append(node)
    return new_tree


def _union(first: list[str], second: list[str]) -> list[str]:
    merged = list(first)
    for item in second:
        if item not in merged:
            merged.append(item)
    return merged


def merge_nodes(tree: MindMapNode, source_id: str, dest_id: str) -> MindMapNode:
    """Fold ``source_id`` into ``dest_id`` and drop the source.

    Skills and prerequisites are unioned without duplicates. The source's children move (same
    IDs) to the end of the destination's children.

    Raises:
        RootNodeError: ``source_id`` is the root.
        CycleError: the destination lies inside the source subtree (including itself).
        NodeNotFoundError: either ID is not in the tree.
    """

    if source_id == tree.id:
        raise RootNodeError("merge away")
    new_tree = _copy(tree)
    source = _require(new_tree, source_id, role="Source module")
    if find_node(source, dest_id) is not None:
        raise CycleError("merge", source_id, dest_id)
    dest = _require(new_tree, dest_id, role="Target module")

    dest.skills = _union(dest.skills, source.skills)
    dest.prerequisites = _union(dest.prerequisites, source.prerequisites)
    dest.children = dest.children + source.children
    source.children = []
    _detach(new_tree, source_id)
    return new_tree


# --- named family operations ----------------------------------------------------------------


def set_title(tree: MindMapNode, node_id: str, title: str) -> MindMapNode:
    return set_field(tree, node_id, "title", title)


def set_description(tree: MindMapNode, node_id: str, description: str) -> MindMapNode:
    return set_field(tree, node_id, "description", description)


def set_difficulty(tree: MindMapNode, node_id: str, difficulty: Difficulty | str) -> MindMapNode:
    return set_field(tree, node_id, "difficulty", Difficulty(difficulty))


def set_hours(tree: MindMapNode, node_id: str, hours: float) -> MindMapNode:
    return set_field(tree, node_id, "estimated_hours", float(hours))


def set_course_title(tree: MindMapNode, title: str) -> MindMapNode:
    return set_field(tree, tree.id, "title", title)


def set_course_description(tree: MindMapNode, description: str) -> MindMapNode:
    return set_field(tree, tree.id, "description", description)


def _edit_list(tree: MindMapNode, node_id: str, field: str, value: str, *, add: bool) -> MindMapNode:
    new_tree = _copy(tree)
    node = _require(new_tree, node_id)
    items: list[str] = getattr(node, field)
    if add and value not in items:
        items.append(value)
    elif not add and value in items:
        items.remove(value)
    return new_tree


def add_skill(tree: MindMapNode, node_id: str, skill: str) -> MindMapNode:
    """Add a skill unless an identical one is already listed."""

    return _edit_list(tree, node_id, "skills", skill, add=True)


def remove_skill(tree: MindMapNode, node_id: str, skill: str) -> MindMapNode:
    return _edit_list(tree, node_id, "skills", skill, add=False)


def add_prerequisite(tree: MindMapNode, node_id: str, prerequisite: str) -> MindMapNode:
    return _edit_list(tree, node_id, "prerequisites", prerequisite, add=True)


def remove_prerequisite(tree: MindMapNode, node_id: str, prerequisite: str) -> MindMapNode:
    return _edit_list(tree, node_id, "prerequisites", prerequisite, add=False)
