"""Tests for the tree mutation engine."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from coursecraft.errors import CycleError, NodeNotFoundError, RootNodeError
from coursecraft.models.mindmap import Difficulty, MindMapNode
from coursecraft.tree import mutations
from coursecraft.tree.mutations import find_node, find_parent, iter_nodes
from coursecraft.tree.stats import count_nodes


def _ids(tree: MindMapNode) -> list[str]:
    return [node.id for node in iter_nodes(tree)]


def test_set_field_returns_new_tree(course: MindMapNode) -> None:
    """It should change one field and leave the input alone."""

    before = course.model_dump()
    updated = mutations.set_field(course, "lesson-1", "title", "Iteration")

    assert find_node(updated, "lesson-1").title == "Iteration"
    assert course.model_dump() == before
    assert find_node(updated, "module-2") == find_node(course, "module-2")


def test_set_field_unknown_node_is_noop(course: MindMapNode) -> None:
    """It should return an equal tree for an unknown node ID."""

    assert mutations.set_field(course, "nope", "title", "X") == course


def test_set_field_accepts_alias_and_rejects_structure(course: MindMapNode) -> None:
    """It should accept the camelCase hours key and refuse id/children."""

    updated = mutations.set_field(course, "module-1", "estimatedHours", 5)
    assert find_node(updated, "module-1").estimated_hours == 5.0

    with pytest.raises(ValueError):
        mutations.set_field(course, "module-1", "id", "other")
    with pytest.raises(ValueError):
        mutations.set_field(course, "module-1", "children", [])


def test_named_setters(course: MindMapNode) -> None:
    """It should coerce difficulty and hours."""

    updated = mutations.set_difficulty(course, "lesson-1", "advanced")
    updated = mutations.set_hours(updated, "lesson-1", "2.5")
    lesson = find_node(updated, "lesson-1")

    assert lesson.difficulty is Difficulty.ADVANCED
    assert lesson.estimated_hours == 2.5
    assert mutations.set_course_title(course, "Modern JS").title == "Modern JS"
    assert mutations.set_course_description(course, "New").description == "New"


def test_invalid_values_are_rejected(course: MindMapNode) -> None:
    """It should reject values outside the node model's constraints."""

    with pytest.raises(ValueError):
        mutations.set_difficulty(course, "lesson-1", "expert")
    with pytest.raises(ValidationError):
        mutations.set_hours(course, "lesson-1", -1)


def test_add_child_defaults(course: MindMapNode) -> None:
    """It should append a fresh module with defaults under the root."""

    updated = mutations.add_child(course, None)
    added = updated.children[-1]

    assert added.title == "New Module"
    assert added.level == 1
    assert added.difficulty is Difficulty.BEGINNER
    assert added.estimated_hours == 1.0
    assert added.id not in _ids(course)
    assert count_nodes(updated) == count_nodes(course) + 1


def test_add_child_with_data(course: MindMapNode) -> None:
    """It should apply supplied fields but never a supplied ID."""

    updated = mutations.add_child(
        course, "module-1", {"id": "lesson-1", "title": "Recursion", "estimatedHours": 3, "description": "Calls"}
    )
    added = find_node(updated, "module-1").children[-1]

    assert added.title == "Recursion"
    assert added.estimated_hours == 3.0
    assert added.description == "Calls"
    assert added.id != "lesson-1"
    assert len(set(_ids(updated))) == len(_ids(updated))


def test_add_child_unknown_parent(course: MindMapNode) -> None:
    """It should refuse an unknown parent."""

    with pytest.raises(NodeNotFoundError):
        mutations.add_child(course, "nope", {"title": "X"})


def test_remove_node(course: MindMapNode) -> None:
    """It should drop the node with its subtree."""

    updated = mutations.remove_node(course, "module-1")

    assert find_node(updated, "module-1") is None
    assert find_node(updated, "lesson-1") is None
    assert _ids(updated) == ["root", "module-2"]


def test_remove_root_is_rejected(course: MindMapNode) -> None:
    """It should never delete the root."""

    with pytest.raises(RootNodeError):
        mutations.remove_node(course, "root")
    with pytest.raises(NodeNotFoundError):
        mutations.remove_node(course, "nope")


def test_reorder_children(course: MindMapNode) -> None:
    """It should sort listed children first and keep the rest stable."""

    updated = mutations.reorder_children(course, ["module-2", "module-1"])
    assert [child.id for child in updated.children] == ["module-2", "module-1"]

    partial = mutations.reorder_children(course, ["module-2"])
    assert [child.id for child in partial.children] == ["module-2", "module-1"]

    unchanged = mutations.reorder_children(course, [])
    assert [child.id for child in unchanged.children] == ["module-1", "module-2"]


def test_duplicate_node(course: MindMapNode) -> None:
    """It should copy the subtree with fresh IDs next to the original."""

    updated = mutations.duplicate_node(course, "module-1")
    copy = updated.children[-1]

    assert copy.title == "JavaScript Basics (Copy)"
    assert copy.id not in _ids(course)
    assert copy.children[0].title == "Loops"
    assert copy.children[0].id != "lesson-1"
    assert copy.skills == ["Variables", "Functions"]
    assert count_nodes(updated) == count_nodes(course) + 2
    assert len(set(_ids(updated))) == len(_ids(updated))


def test_duplicate_node_placement(course: MindMapNode) -> None:
    """It should place a nested copy under the original's parent or the given parent."""

    nested = mutations.duplicate_node(course, "lesson-1")
    assert [c.title for c in find_node(nested, "module-1").children] == ["Loops", "Loops (Copy)"]

    moved = mutations.duplicate_node(course, "lesson-1", "module-2", suffix=" v2")
    assert [c.title for c in find_node(moved, "module-2").children] == ["Loops v2"]


def test_move_node(course: MindMapNode) -> None:
    """It should move a subtree keeping IDs."""

    updated = mutations.move_node(course, "lesson-1", "module-2")

    assert find_parent(updated, "lesson-1").id == "module-2"
    assert find_node(updated, "module-1").children == []
    assert sorted(_ids(updated)) == sorted(_ids(course))


def test_move_node_rejections(course: MindMapNode) -> None:
    """It should refuse to move the root or into its own subtree."""

    with pytest.raises(RootNodeError):
        mutations.move_node(course, "root", "module-1")
    with pytest.raises(CycleError):
        mutations.move_node(course, "module-1", "lesson-1")
    with pytest.raises(CycleError):
        mutations.move_node(course, "module-1", "module-1")
    with pytest.raises(NodeNotFoundError):
        mutations.move_node(course, "module-1", "nope")


def test_merge_nodes_unions_lists() -> None:
    """It should union skills without duplicates and drop the source."""

    tree = MindMapNode.from_payload(
        {
            "id": "root",
            "title": "Course",
            "children": [
                {"id": "a", "title": "A", "skills": ["y", "z"], "prerequisites": ["p"]},
                {
                    "id": "b",
                    "title": "B",
                    "skills": ["x", "y"],
                    "prerequisites": ["p", "q"],
                    "children": [{"id": "b1", "title": "B1"}],
                },
            ],
        }
    )
    merged = mutations.merge_nodes(tree, "b", "a")
    dest = find_node(merged, "a")

    assert set(dest.skills) == {"x", "y", "z"}
    assert len(dest.skills) == 3
    assert dest.prerequisites == ["p", "q"]
    assert [c.id for c in dest.children] == ["b1"]
    assert find_node(merged, "b") is None


def test_merge_nodes_rejections(course: MindMapNode) -> None:
    """It should refuse to merge the root away or into the source subtree."""

    with pytest.raises(RootNodeError):
        mutations.merge_nodes(course, "root", "module-1")
    with pytest.raises(CycleError):
        mutations.merge_nodes(course, "module-1", "lesson-1")


def test_list_edits(course: MindMapNode) -> None:
    """It should add and remove list entries without duplicates."""

    same = mutations.add_skill(course, "module-1", "Variables")
    assert find_node(same, "module-1").skills == ["Variables", "Functions"]

    added = mutations.add_skill(course, "module-1", "Closures")
    assert find_node(added, "module-1").skills == ["Variables", "Functions", "Closures"]

    removed = mutations.remove_prerequisite(course, "module-1", "HTML Basics")
    assert find_node(removed, "module-1").prerequisites == []

    missing = mutations.remove_skill(course, "module-1", "Nothing")
    assert missing == course

    extra = mutations.add_prerequisite(course, "module-2", "HTML Basics")
    assert find_node(extra, "module-2").prerequisites == ["JavaScript Basics", "HTML Basics"]
    assert find_node(course, "module-2").prerequisites == ["JavaScript Basics"]

    with pytest.raises(NodeNotFoundError):
        mutations.add_skill(course, "nope", "X")
