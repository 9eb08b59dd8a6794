"""Tests for tree summaries and the flat record view."""

from __future__ import annotations

from coursecraft.models.mindmap import MindMapNode
from coursecraft.tree.stats import NodeRecord, count_nodes, flatten, rebuild, total_hours


def test_count_and_hours(course: MindMapNode) -> None:
    """It should count every node and sum hours, treating missing hours as zero."""

    assert count_nodes(course) == 4
    assert total_hours(course) == 6.0


def test_flatten_records(course: MindMapNode) -> None:
    """It should list nodes in pre-order with parent, depth and sibling index."""

    records = flatten(course)

    assert [r.node.id for r in records] == ["root", "module-1", "lesson-1", "module-2"]
    assert [r.parent_id for r in records] == [None, "root", "module-1", "root"]
    assert [r.depth for r in records] == [0, 1, 2, 1]
    assert [r.order_index for r in records] == [0, 0, 0, 1]
    assert all(r.node.children == [] for r in records)
    assert course.children[0].children[0].id == "lesson-1"


def test_rebuild_round_trip(course: MindMapNode) -> None:
    """It should reassemble the original tree from its records."""

    assert rebuild(flatten(course)) == course
    assert rebuild(reversed(flatten(course))) == course


def test_rebuild_drops_orphans_and_extra_roots() -> None:
    """It should skip records that cannot be attached."""

    records = [
        NodeRecord(node=MindMapNode(id="root", title="Course"), depth=0, order_index=0),
        NodeRecord(node=MindMapNode(id="other", title="Other root"), depth=0, order_index=1),
        NodeRecord(node=MindMapNode(id="m1", title="M1"), parent_id="root", depth=1, order_index=0),
        NodeRecord(node=MindMapNode(id="orphan", title="Orphan"), parent_id="ghost", depth=1, order_index=1),
    ]
    tree = rebuild(records)

    assert tree is not None
    assert tree.id == "root"
    assert [c.id for c in tree.children] == ["m1"]


def test_rebuild_empty() -> None:
    """It should return None without a root."""

    assert rebuild([]) is None
