"""Pydantic models used across the project."""

from __future__ import annotations

from coursecraft.models.command import CommandOutcome, ErrorKind, MutationName, ParsedCommand
from coursecraft.models.intent import (
    Handler,
    Intent,
    IntentResult,
    QuestionType,
    RouteContext,
    RouteResult,
)
from coursecraft.models.mindmap import COPY_SUFFIX, DEFAULT_MODULE_TITLE, Difficulty, MindMapNode, Position
from coursecraft.models.stream import StreamParseResult, StructuredPayload

__all__ = [
    "COPY_SUFFIX",
    "DEFAULT_MODULE_TITLE",
    "CommandOutcome",
    "Difficulty",
    "ErrorKind",
    "Handler",
    "Intent",
    "IntentResult",
    "MindMapNode",
    "MutationName",
    "ParsedCommand",
    "Position",
    "QuestionType",
    "RouteContext",
    "RouteResult",
    "StreamParseResult",
    "StructuredPayload",
]
