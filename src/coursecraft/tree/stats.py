"""Tree summaries and the flat record view used by persistence layers.

Storage backends keep a course as one row per node with a parent reference and a sibling
order. :func:`flatten` produces those rows and :func:`rebuild` turns them back into a tree.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, Field

from coursecraft.logging import get_logger
from coursecraft.models.mindmap import MindMapNode
from coursecraft.tree.mutations import iter_nodes

logger = get_logger(__name__)


class NodeRecord(BaseModel):
    """One node of a flattened tree."""

    node: MindMapNode
    parent_id: str | None = None
    depth: int = Field(ge=0)
    order_index: int = Field(ge=0)


def count_nodes(tree: MindMapNode) -> int:
    return sum(1 for _ in iter_nodes(tree))


def total_hours(tree: MindMapNode) -> float:
    """Sum of ``estimated_hours`` over the whole tree; missing values count as zero."""

    return sum(node.estimated_hours or 0.0 for node in iter_nodes(tree))


def flatten(tree: MindMapNode) -> list[NodeRecord]:
    """List every node in pre-order with its parent, depth and sibling index.

    Each record's ``node`` has an empty ``children`` list; structure lives in ``parent_id``.
    """

    records: list[NodeRecord] = []
    stack: list[tuple[MindMapNode, str | None, int, int]] = [(tree, None, 0, 0)]
    while stack:
        node, parent_id, depth, order = stack.pop()
        records.append(
            NodeRecord(
                node=node.model_copy(update={"children": []}, deep=True),
                parent_id=parent_id,
                depth=depth,
                order_index=order,
            )
        )
        for index in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[index], node.id, depth + 1, index))
    return records


def rebuild(records: Iterable[NodeRecord]) -> MindMapNode | None:
    """Reassemble a tree from flat records.

    Children are ordered by ``order_index``. Records whose parent is missing are dropped with a
    warning. Returns None when no record is a root.
    """

    rows = list(records)
    nodes = {row.node.id: row.node.model_copy(update={"children": []}, deep=True) for row in rows}
    root: MindMapNode | None = None
    for row in sorted(rows, key=lambda r: (r.depth, r.order_index)):
        node = nodes[row.node.id]
        if row.parent_id is None:
            if root is not None:
                logger.warning("rebuild: extra root %s ignored", node.id)
                continue
            root = node
            continue
        parent = nodes.get(row.parent_id)
        if parent is None:
            logger.warning("rebuild: orphan %s (parent %s missing)", node.id, row.parent_id)
            continue
        parent.children.append(node)
    return root
