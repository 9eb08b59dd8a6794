"""Applying editing commands to the open course."""

from __future__ import annotations

from coursecraft.editing.executor import CommandExecutor
from coursecraft.editing.registry import MutationRegistry, MutationResult, MutationTool, build_registry
from coursecraft.editing.session import ChatSession, TurnResult

__all__ = [
    "ChatSession",
    "CommandExecutor",
    "MutationRegistry",
    "MutationResult",
    "MutationTool",
    "TurnResult",
    "build_registry",
]
