"""Pure operations over course outline trees."""

from __future__ import annotations

from coursecraft.tree.mutations import (
    add_child,
    add_prerequisite,
    add_skill,
    duplicate_node,
    find_node,
    find_parent,
    iter_nodes,
    merge_nodes,
    move_node,
    new_module,
    remove_node,
    remove_prerequisite,
    remove_skill,
    reorder_children,
    set_course_description,
    set_course_title,
    set_description,
    set_difficulty,
    set_field,
    set_hours,
    set_title,
)
from coursecraft.tree.stats import NodeRecord, count_nodes, flatten, rebuild, total_hours

__all__ = [
    "NodeRecord",
    "add_child",
    "add_prerequisite",
    "add_skill",
    "count_nodes",
    "duplicate_node",
    "find_node",
    "find_parent",
    "flatten",
    "iter_nodes",
    "merge_nodes",
    "move_node",
    "new_module",
    "rebuild",
    "remove_node",
    "remove_prerequisite",
    "remove_skill",
    "reorder_children",
    "set_course_description",
    "set_course_title",
    "set_description",
    "set_difficulty",
    "set_field",
    "set_hours",
    "set_title",
    "total_hours",
]
