"""Command executor: utterance -> parsed command -> resolved IDs -> new tree.

Every failure along the way is reported as a :class:`CommandOutcome` value; the document
handed back on failure is the unchanged input, so retrying against it is always safe.
"""

from __future__ import annotations

from coursecraft.config import Settings
from coursecraft.errors import CommandParseError, NodeNotFoundError
from coursecraft.editing.registry import MutationRegistry, build_registry
from coursecraft.logging import get_logger
from coursecraft.models.command import CommandOutcome, ErrorKind, ParsedCommand
from coursecraft.models.mindmap import MindMapNode
from coursecraft.nlu.grammar import parse_strict
from coursecraft.nlu.resolver import resolve_parameters

logger = get_logger(__name__)

NO_DOCUMENT_MESSAGE = "There is no course open to edit. Create one first."


class CommandExecutor:
    """Runs natural-language editing commands against a course tree."""

    def __init__(self, registry: MutationRegistry | None = None, *, settings: Settings | None = None) -> None:
        self._registry = registry or build_registry(settings)

    @property
    def registry(self) -> MutationRegistry:
        return self._registry

    def execute(self, utterance: str, document: MindMapNode | None) -> CommandOutcome:
        """Parse ``utterance`` and apply it to ``document``.

        Args:
            utterance: Raw editing request.
            document: Current course tree, or None when nothing is open.

        Returns:
            CommandOutcome carrying the new tree on success.
        """

        try:
            command = parse_strict(utterance)
        except CommandParseError as exc:
            logger.info("Command not understood")
            return CommandOutcome(
                success=False,
                message=exc.help_message,
                document=document,
                error_kind=ErrorKind.PARSE_MISS,
            )
        return self.apply(command, document)

    def apply(self, command: ParsedCommand, document: MindMapNode | None) -> CommandOutcome:
        """Resolve and run an already parsed command."""

        if document is None:
            return CommandOutcome(
                success=False,
                message=NO_DOCUMENT_MESSAGE,
                command=command,
                error_kind=ErrorKind.NO_DOCUMENT,
            )

        try:
            args = resolve_parameters(command, document)
        except NodeNotFoundError as exc:
            logger.info("Command target not found: %s", exc)
            return CommandOutcome(
                success=False,
                message=str(exc),
                command=command,
                document=document,
                error_kind=ErrorKind.NOT_FOUND,
            )

        result = self._registry.execute(command.mutation, document, args)
        if not result.success or result.document is None:
            return CommandOutcome(
                success=False,
                message=result.error or f"Failed to {command.action}",
                command=command,
                document=document,
                error_kind=result.error_kind or ErrorKind.REJECTED,
            )

        logger.info("Applied %s", command.mutation.value)
        return CommandOutcome(
            success=True,
            message=f"Successfully {command.action}",
            command=command,
            document=result.document,
        )
