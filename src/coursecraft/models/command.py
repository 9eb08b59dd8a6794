"""Editing command models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from coursecraft.models.mindmap import MindMapNode


class MutationName(str, Enum):
    """Tree operations an editing command can target."""

    SET_TITLE = "set_title"
    SET_DESCRIPTION = "set_description"
    SET_DIFFICULTY = "set_difficulty"
    SET_HOURS = "set_hours"
    ADD_SKILL = "add_skill"
    REMOVE_SKILL = "remove_skill"
    ADD_PREREQUISITE = "add_prerequisite"
    REMOVE_PREREQUISITE = "remove_prerequisite"
    ADD_MODULE = "add_module"
    DELETE_MODULE = "delete_module"
    DUPLICATE_MODULE = "duplicate_module"
    MOVE_MODULE = "move_module"
    SET_COURSE_TITLE = "set_course_title"
    SET_COURSE_DESCRIPTION = "set_course_description"
    MERGE_MODULES = "merge_modules"


class ParsedCommand(BaseModel):
    """A natural-language editing command matched against the grammar.

    Node references in ``parameters`` are still human-readable titles at this point.
    """

    action: str
    mutation: MutationName
    parameters: list[Any] = Field(default_factory=list)


class ErrorKind(str, Enum):
    PARSE_MISS = "parse_miss"
    NOT_FOUND = "not_found"
    REJECTED = "rejected"
    NO_DOCUMENT = "no_document"


class CommandOutcome(BaseModel):
    """Result of running one editing utterance against a document."""

    success: bool
    message: str
    command: ParsedCommand | None = None
    document: MindMapNode | None = None
    error_kind: ErrorKind | None = None
