"""Command grammar parser.

Turns a natural-language editing request ("set the difficulty of Loops to advanced") into a
:class:`~coursecraft.models.command.ParsedCommand`. The grammar is an ordered table of rules;
each rule is gated by a cheap word check on the lowercased text before its regex runs against
the original text, so captured titles keep their case. The first rule that produces a command
wins.

Node references stay human-readable here. :mod:`coursecraft.nlu.resolver` maps them to IDs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from coursecraft.errors import CommandParseError
from coursecraft.logging import get_logger
from coursecraft.models.command import MutationName, ParsedCommand
from coursecraft.models.mindmap import DEFAULT_MODULE_TITLE

logger = get_logger(__name__)

HELP_MESSAGE = (
    "I couldn't understand that command. Please try rephrasing it. Try commands like:\n"
    '• "add a new module called [Title]"\n'
    '• "add a new module" (creates "New Module")\n'
    '• "change the title of [Module] to [New Title]"\n'
    '• "add the skill [Skill] to [Module]"\n'
    '• "set the difficulty of [Module] to [beginner/intermediate/advanced]"\n'
    '• "set the hours of [Module] to [Number]"\n'
    '• "move the module [Module] to [Parent]"\n'
    '• "merge the module [Module] into [Module]"\n'
    '• "delete the module [Module]"'
)

_QUOTES = "\"'“”‘’`"
_MODULE_NOUN = r"(?:module|lesson|section)"

Builder = Callable[[re.Match[str]], "ParsedCommand | None"]


def clean_span(text: str | None) -> str:
    """Trim a captured span, drop trailing sentence punctuation and surrounding quotes."""

    if text is None:
        return ""
    cleaned = text.strip().rstrip(".!?").strip()
    if len(cleaned) >= 2 and cleaned[0] in _QUOTES and cleaned[-1] in _QUOTES:
        cleaned = cleaned[1:-1].strip()
    return cleaned


@dataclass(frozen=True)
class GrammarRule:
    """One entry of the command grammar.

    Attributes:
        name: Rule name, used in logs.
        triggers: Word groups; the lowercased utterance must contain a word from every group.
        pattern: Regex applied (case-insensitively) to the original utterance.
        build: Turns a regex match into a command, or returns None to let later rules try.
    """

    name: str
    triggers: tuple[tuple[str, ...], ...]
    pattern: re.Pattern[str]
    build: Builder

    def gate(self, lowered: str) -> bool:
        return all(any(word in lowered for word in group) for group in self.triggers)

    def apply(self, utterance: str, lowered: str) -> ParsedCommand | None:
        if not self.gate(lowered):
            return None
        m = self.pattern.search(utterance)
        if m is None:
            return None
        return self.build(m)


def _re(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE | re.DOTALL)


# --- builders -------------------------------------------------------------------------------


def _set_title(m: re.Match[str]) -> ParsedCommand:
    target, title = clean_span(m.group(1)), clean_span(m.group(2))
    return ParsedCommand(
        action=f'changed title of "{target}" to "{title}"',
        mutation=MutationName.SET_TITLE,
        parameters=[target, title],
    )


def _set_description(m: re.Match[str]) -> ParsedCommand:
    target, description = clean_span(m.group(1)), clean_span(m.group(2))
    return ParsedCommand(
        action=f'changed description of "{target}"',
        mutation=MutationName.SET_DESCRIPTION,
        parameters=[target, description],
    )


def _set_difficulty(m: re.Match[str]) -> ParsedCommand:
    target, difficulty = clean_span(m.group(1)), m.group(2).lower()
    return ParsedCommand(
        action=f'changed difficulty of "{target}" to {difficulty}',
        mutation=MutationName.SET_DIFFICULTY,
        parameters=[target, difficulty],
    )


def _set_hours(m: re.Match[str]) -> ParsedCommand:
    target, hours = clean_span(m.group(1)), float(m.group(2))
    return ParsedCommand(
        action=f'changed hours of "{target}" to {hours:g}',
        mutation=MutationName.SET_HOURS,
        parameters=[target, hours],
    )


def _list_item(mutation: MutationName, verb: str, noun: str, preposition: str) -> Builder:
    def build(m: re.Match[str]) -> ParsedCommand:
        value, target = clean_span(m.group(1)), clean_span(m.group(2))
        return ParsedCommand(
            action=f'{verb} {noun} "{value}" {preposition} "{target}"',
            mutation=mutation,
            parameters=[target, value],
        )

    return build


def _add_module_command(title: str, parent: str | None) -> ParsedCommand:
    title = title or DEFAULT_MODULE_TITLE
    return ParsedCommand(
        action=f'added new module "{title}"',
        mutation=MutationName.ADD_MODULE,
        parameters=[parent or None, {"title": title}],
    )


def _add_default_module(m: re.Match[str]) -> ParsedCommand:
    return _add_module_command(DEFAULT_MODULE_TITLE, None)


def _add_module(m: re.Match[str]) -> ParsedCommand:
    return _add_module_command(clean_span(m.group(1)), clean_span(m.group(2)) or None)


_TO_PARENT_RE = _re(r"^(.+?)\s+to\s+(.+)$")


def _add_module_loose(m: re.Match[str]) -> ParsedCommand:
    rest = clean_span(m.group("rest"))
    if not rest:
        return _add_module_command(DEFAULT_MODULE_TITLE, None)
    parent_match = _TO_PARENT_RE.match(rest)
    if parent_match:
        return _add_module_command(clean_span(parent_match.group(1)), clean_span(parent_match.group(2)))
    return _add_module_command(rest, None)


def _delete_module(m: re.Match[str]) -> ParsedCommand:
    target = clean_span(m.group(1))
    return ParsedCommand(
        action=f'deleted module "{target}"',
        mutation=MutationName.DELETE_MODULE,
        parameters=[target],
    )


def _duplicate_module(m: re.Match[str]) -> ParsedCommand:
    target = clean_span(m.group(1))
    parent = clean_span(m.group(2)) or None
    return ParsedCommand(
        action=f'duplicated module "{target}"',
        mutation=MutationName.DUPLICATE_MODULE,
        parameters=[target, parent],
    )


def _move_module(m: re.Match[str]) -> ParsedCommand:
    target, parent = clean_span(m.group(1)), clean_span(m.group(2))
    return ParsedCommand(
        action=f'moved module "{target}" to "{parent}"',
        mutation=MutationName.MOVE_MODULE,
        parameters=[target, parent],
    )


def _set_course_title(m: re.Match[str]) -> ParsedCommand:
    title = clean_span(m.group(1))
    return ParsedCommand(
        action=f'changed course title to "{title}"',
        mutation=MutationName.SET_COURSE_TITLE,
        parameters=[title],
    )


def _set_course_description(m: re.Match[str]) -> ParsedCommand:
    return ParsedCommand(
        action="changed course description",
        mutation=MutationName.SET_COURSE_DESCRIPTION,
        parameters=[clean_span(m.group(1))],
    )


def _merge_modules(m: re.Match[str]) -> ParsedCommand:
    source, dest = clean_span(m.group(1)), clean_span(m.group(2))
    return ParsedCommand(
        action=f'merged module "{source}" into "{dest}"',
        mutation=MutationName.MERGE_MODULES,
        parameters=[source, dest],
    )


_EDIT = ("change", "edit", "update", "modify")
_SET = ("change", "edit", "update", "set")
_COURSE = ("course", "learning path")

RULES: tuple[GrammarRule, ...] = (
    GrammarRule(
        name="rename",
        triggers=(_EDIT, ("title", "name"), ("to", "as")),
        pattern=_re(r"(?:change|edit|update|modify)\s+(?:the\s+)?(?:title|name)\s+(?:of\s+)?(.+?)\s+(?:to|as)\s+(.+)"),
        build=_set_title,
    ),
    GrammarRule(
        name="rename_short",
        triggers=(("rename",), ("to", "as")),
        pattern=_re(r"rename\s+(?:the\s+)?(?:" + _MODULE_NOUN + r"\s+)?(.+?)\s+(?:to|as)\s+(.+)"),
        build=_set_title,
    ),
    GrammarRule(
        name="describe",
        triggers=(_EDIT, ("description", "desc"), ("to", "as")),
        pattern=_re(
            r"(?:change|edit|update|modify)\s+(?:the\s+)?(?:description|desc)\s+(?:of\s+)?(.+?)\s+(?:to|as)\s+(.+)"
        ),
        build=_set_description,
    ),
    GrammarRule(
        name="difficulty",
        triggers=(_SET, ("difficulty", "level"), ("to", "as")),
        pattern=_re(
            r"(?:change|edit|update|set)\s+(?:the\s+)?(?:difficulty|level)\s+(?:of\s+)?(.+?)\s+(?:to|as)\s+"
            r"(beginner|intermediate|advanced)\b"
        ),
        build=_set_difficulty,
    ),
    GrammarRule(
        name="hours",
        triggers=(_SET, ("hours", "time", "duration"), ("to", "as")),
        pattern=_re(
            r"(?:change|edit|update|set)\s+(?:the\s+)?(?:hours|time|duration)\s+(?:of\s+)?(.+?)\s+(?:to|as)\s+"
            r"(\d+(?:\.\d+)?)"
        ),
        build=_set_hours,
    ),
    GrammarRule(
        name="add_skill",
        triggers=(("add", "include"), ("skill",), ("to",)),
        pattern=_re(r"(?:add|include)\s+(?:the\s+)?skill\s+(.+?)\s+to\s+(.+)"),
        build=_list_item(MutationName.ADD_SKILL, "added", "skill", "to"),
    ),
    GrammarRule(
        name="remove_skill",
        triggers=(("remove", "delete", "exclude"), ("skill",), ("from",)),
        pattern=_re(r"(?:remove|delete|exclude)\s+(?:the\s+)?skill\s+(.+?)\s+from\s+(.+)"),
        build=_list_item(MutationName.REMOVE_SKILL, "removed", "skill", "from"),
    ),
    GrammarRule(
        name="add_prerequisite",
        triggers=(("add", "include"), ("prerequisite", "prereq"), ("to",)),
        pattern=_re(r"(?:add|include)\s+(?:the\s+)?(?:prerequisite|prereq)\s+(.+?)\s+to\s+(.+)"),
        build=_list_item(MutationName.ADD_PREREQUISITE, "added", "prerequisite", "to"),
    ),
    GrammarRule(
        name="remove_prerequisite",
        triggers=(("remove", "delete", "exclude"), ("prerequisite", "prereq"), ("from",)),
        pattern=_re(r"(?:remove|delete|exclude)\s+(?:the\s+)?(?:prerequisite|prereq)\s+(.+?)\s+from\s+(.+)"),
        build=_list_item(MutationName.REMOVE_PREREQUISITE, "removed", "prerequisite", "from"),
    ),
    # add-module falls back through three layers and defaults the title rather than failing
    GrammarRule(
        name="add_module_bare",
        triggers=(),
        pattern=_re(r"^\s*add\s+a\s+new\s+module\s*[.!]?\s*$"),
        build=_add_default_module,
    ),
    GrammarRule(
        name="add_module",
        triggers=(("add", "create", "insert"), ("module", "lesson", "section", "new")),
        pattern=_re(
            r"(?:add|create|insert)\s+(?:a\s+)?(?:new\s+)?" + _MODULE_NOUN + r"\s+(?:called\s+|named\s+)?(.+?)(?:\s+to\s+(.+))?$"
        ),
        build=_add_module,
    ),
    GrammarRule(
        name="add_module_loose",
        triggers=(("add", "create", "insert"), ("module", "lesson", "section", "new")),
        pattern=_re(r"(?:add|create|insert)\s+(?:a\s+)?(?:new\s+)?" + _MODULE_NOUN + r"(?:\s+(?P<rest>.+))?"),
        build=_add_module_loose,
    ),
    GrammarRule(
        name="delete_module",
        triggers=(("delete", "remove", "drop"), ("module", "lesson", "section")),
        pattern=_re(r"(?:delete|remove|drop)\s+(?:the\s+)?" + _MODULE_NOUN + r"\s+(.+)"),
        build=_delete_module,
    ),
    GrammarRule(
        name="duplicate_module",
        triggers=(("duplicate", "copy", "clone"), ("module", "lesson", "section")),
        pattern=_re(r"(?:duplicate|copy|clone)\s+(?:the\s+)?" + _MODULE_NOUN + r"\s+(.+?)(?:\s+to\s+(.+))?$"),
        build=_duplicate_module,
    ),
    GrammarRule(
        name="move_module",
        triggers=(("move", "relocate"), ("module", "lesson", "section")),
        pattern=_re(r"(?:move|relocate)\s+(?:the\s+)?" + _MODULE_NOUN + r"\s+(.+?)\s+(?:to|under|into)\s+(.+)"),
        build=_move_module,
    ),
    GrammarRule(
        name="course_title",
        triggers=(_EDIT, _COURSE, ("title", "name"), ("to", "as")),
        pattern=_re(r"(?:change|edit|update|modify)\s+(?:the\s+)?(?:course|learning\s+path)\s+(?:title|name)\s+(?:to|as)\s+(.+)"),
        build=_set_course_title,
    ),
    GrammarRule(
        name="course_description",
        triggers=(_EDIT, _COURSE, ("description", "desc"), ("to", "as")),
        pattern=_re(
            r"(?:change|edit|update|modify)\s+(?:the\s+)?(?:course|learning\s+path)\s+(?:description|desc)\s+(?:to|as)\s+(.+)"
        ),
        build=_set_course_description,
    ),
    GrammarRule(
        name="merge_modules",
        triggers=(("merge", "combine"), ("module", "lesson", "section")),
        pattern=_re(r"(?:merge|combine)\s+(?:the\s+)?" + _MODULE_NOUN + r"\s+(.+?)\s+(?:with|into)\s+(.+)"),
        build=_merge_modules,
    ),
)


def parse(utterance: str) -> ParsedCommand | None:
    """Match an editing utterance against the grammar.

    Args:
        utterance: Raw user message.

    Returns:
        The first command any rule produces, or None when nothing matches.
    """

    text = (utterance or "").strip()
    lowered = text.lower()
    for rule in RULES:
        command = rule.apply(text, lowered)
        if command is not None:
            logger.debug("parse: rule %s matched -> %s", rule.name, command.mutation.value)
            return command
    logger.info("No command pattern matched")
    return None


def parse_strict(utterance: str) -> ParsedCommand:
    """Like :func:`parse` but raise :class:`CommandParseError` with guidance on a miss."""

    command = parse(utterance)
    if command is None:
        raise CommandParseError(utterance, HELP_MESSAGE)
    return command
