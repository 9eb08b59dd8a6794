"""Keyword-based intent classifier.

Runs before the command grammar to decide whether a chat message is a request to create a
new course, edit the current one, ask a question, or just chat. Pure and cheap enough to run
on every keystroke.
"""

from __future__ import annotations

import re

from coursecraft.logging import get_logger
from coursecraft.models.intent import Intent, IntentResult

logger = get_logger(__name__)


CREATION_VERBS: tuple[str, ...] = ("create", "make", "build", "generate", "new", "start", "begin", "initiate")

EDITING_VERBS: tuple[str, ...] = (
    "change",
    "edit",
    "update",
    "modify",
    "add",
    "remove",
    "delete",
    "alter",
    "adjust",
    "revise",
    "rework",
    "refactor",
    "improve",
    "enhance",
    # verbs of the command grammar families
    "set",
    "rename",
    "move",
    "merge",
    "duplicate",
    "insert",
)

QUESTION_MARKERS: tuple[str, ...] = (
    "how",
    "what",
    "why",
    "when",
    "where",
    "who",
    "which",
    "explain",
    "help",
    "tell me",
    "show me",
    "describe",
    "clarify",
    "understand",
    "learn about",
)

DOMAIN_NOUNS: tuple[str, ...] = (
    "module",
    "lesson",
    "course",
    "learning",
    "path",
    "skill",
    "knowledge",
    "topic",
    "subject",
    "curriculum",
    "syllabus",
    "training",
    "education",
)


def _compile(words: tuple[str, ...]) -> list[tuple[str, re.Pattern[str]]]:
    # keywords match at a word start, so "settings" hits "set" but "asset" does not
    return [(w, re.compile(r"\b" + re.escape(w))) for w in words]


_CREATION = _compile(CREATION_VERBS)
_EDITING = _compile(EDITING_VERBS)
_QUESTION = _compile(QUESTION_MARKERS)
_DOMAIN = _compile(DOMAIN_NOUNS)


def _found(text: str, patterns: list[tuple[str, re.Pattern[str]]]) -> list[str]:
    return [word for word, pattern in patterns if pattern.search(text)]


def classify(utterance: str, has_existing_document: bool) -> IntentResult:
    """Classify a chat message.

    Editing with an open document takes precedence over every other rule, so "change the
    course" edits even though "course" is also a creation cue.

    Args:
        utterance: Raw user message.
        has_existing_document: Whether a course outline is currently open.

    Returns:
        IntentResult with the matched trigger words as ``extracted_entities``.
    """

    text = (utterance or "").lower().strip()

    editing = _found(text, _EDITING)
    creation = _found(text, _CREATION)
    domain = _found(text, _DOMAIN)

    if editing and has_existing_document:
        return IntentResult(
            intent=Intent.EDIT_EXISTING,
            confidence=0.9,
            reasoning=f"Message contains editing words ({', '.join(editing)}) and there is an active document to edit",
            extracted_entities=editing,
        )

    if has_existing_document and any(text.startswith(verb) for verb in EDITING_VERBS):
        return IntentResult(
            intent=Intent.EDIT_EXISTING,
            confidence=0.9,
            reasoning="Message starts with an editing verb and there is an active document",
            extracted_entities=editing,
        )

    if creation and domain:
        return IntentResult(
            intent=Intent.CREATE_NEW,
            confidence=0.9,
            reasoning=(
                f"Message contains creation words ({', '.join(creation)}) "
                f"and learning-related terms ({', '.join(domain)})"
            ),
            extracted_entities=domain,
        )

    if creation:
        return IntentResult(
            intent=Intent.CREATE_NEW,
            confidence=0.7,
            reasoning=f"Message contains creation words ({', '.join(creation)}) but lacks learning context",
            extracted_entities=creation,
        )

    if editing:
        return IntentResult(
            intent=Intent.EDIT_EXISTING,
            confidence=0.4,
            reasoning=f"Message contains editing words ({', '.join(editing)}) but no active document exists",
            extracted_entities=editing,
        )

    questions = _found(text, _QUESTION)
    if questions:
        return IntentResult(
            intent=Intent.ASK_QUESTION,
            confidence=0.8,
            reasoning=f"Message contains question words ({', '.join(questions)})",
            extracted_entities=questions,
        )

    if "?" in text:
        return IntentResult(
            intent=Intent.ASK_QUESTION,
            confidence=0.9,
            reasoning="Message contains a question mark",
        )

    logger.debug("classify: no intent pattern matched")
    return IntentResult(
        intent=Intent.GENERAL_CONVERSATION,
        confidence=0.3,
        reasoning="Message does not clearly match any intent pattern",
    )


def confidence_band(confidence: float, *, high: float = 0.8, medium: float = 0.5) -> str:
    """Return ``"high"``, ``"medium"`` or ``"low"``."""

    if confidence >= high:
        return "high"
    if confidence >= medium:
        return "medium"
    return "low"


def is_confident(result: IntentResult, threshold: float = 0.5) -> bool:
    return result.confidence >= threshold
