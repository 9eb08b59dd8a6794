"""Tests for title-to-ID resolution."""

from __future__ import annotations

import pytest

from coursecraft.errors import NodeNotFoundError
from coursecraft.models.command import MutationName, ParsedCommand
from coursecraft.models.mindmap import MindMapNode
from coursecraft.nlu.resolver import find_id_by_title, resolve, resolve_parameters


def test_resolve_is_case_insensitive() -> None:
    """It should match titles regardless of case."""

    tree = MindMapNode.from_payload(
        {"id": "root", "title": "Course", "children": [{"id": "m1", "title": "Intro To Python"}]}
    )
    assert resolve(tree, "intro to python") == "m1"
    assert resolve(tree, '"Intro To Python"') == "m1"


def test_resolve_first_match_in_pre_order() -> None:
    """It should return the first node found in depth-first pre-order."""

    tree = MindMapNode.from_payload(
        {
            "id": "root",
            "title": "Course",
            "children": [
                {"id": "a", "title": "Part A", "children": [{"id": "a1", "title": "Dup"}]},
                {"id": "b", "title": "Dup"},
            ],
        }
    )
    assert find_id_by_title(tree, "dup") == "a1"


def test_resolve_root_by_title(course: MindMapNode) -> None:
    """It should find the root node too."""

    assert resolve(course, "test course") == "root"


def test_resolve_missing_raises(course: MindMapNode) -> None:
    """It should raise with a readable message."""

    with pytest.raises(NodeNotFoundError) as excinfo:
        resolve(course, "Nope")
    assert str(excinfo.value) == 'Module "Nope" not found'
    assert find_id_by_title(course, "Nope") is None


def test_resolve_parameters_move(course: MindMapNode) -> None:
    """It should resolve both node references of a move."""

    command = ParsedCommand(action="moved", mutation=MutationName.MOVE_MODULE, parameters=["Loops", "React Components"])
    assert resolve_parameters(command, course) == ["lesson-1", "module-2"]
    assert command.parameters == ["Loops", "React Components"]


def test_resolve_parameters_keeps_optional_and_values(course: MindMapNode) -> None:
    """It should leave values and missing optional parents untouched."""

    add = ParsedCommand(action="added", mutation=MutationName.ADD_MODULE, parameters=[None, {"title": "New Module"}])
    assert resolve_parameters(add, course) == [None, {"title": "New Module"}]

    skill = ParsedCommand(action="added", mutation=MutationName.ADD_SKILL, parameters=["loops", "Loops"])
    assert resolve_parameters(skill, course) == ["lesson-1", "Loops"]

    retitle = ParsedCommand(action="changed", mutation=MutationName.SET_COURSE_TITLE, parameters=["Loops"])
    assert resolve_parameters(retitle, course) == ["Loops"]


def test_resolve_parameters_merge_target_role(course: MindMapNode) -> None:
    """It should name the missing reference's role."""

    merge = ParsedCommand(action="merged", mutation=MutationName.MERGE_MODULES, parameters=["Loops", "Missing"])
    with pytest.raises(NodeNotFoundError) as excinfo:
        resolve_parameters(merge, course)
    assert str(excinfo.value) == 'Target module "Missing" not found'
