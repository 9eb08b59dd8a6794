"""Response router.

Maps a classified intent and its confidence band to a handling strategy: which handler the
host should run, the system prompt variant for the LLM layer, and whether tree-mutation
tools may be used.
"""

from __future__ import annotations

from coursecraft.models.intent import (
    Handler,
    Intent,
    IntentResult,
    QuestionType,
    RouteContext,
    RouteResult,
)
from coursecraft.models.mindmap import MindMapNode

_PROMPTS: dict[tuple[Handler, str], str] = {
    (Handler.CREATION, "high"): (
        "You are a learning path creation expert. Help users create new modules, courses, and learning "
        "structures. Be creative and suggest best practices for organizing knowledge."
    ),
    (Handler.CREATION, "medium"): (
        "You are a learning path creation expert. Help users create new learning content. "
        "Ask clarifying questions if needed."
    ),
    (Handler.EDITING, "high"): (
        "You are a learning path editing assistant. Help users modify existing modules, update content, "
        "and refine their learning structures. Use available editing tools when appropriate."
    ),
    (Handler.EDITING, "medium"): (
        "You are a learning path editing assistant. Help users modify content. "
        "Confirm they have something to edit before proceeding."
    ),
    (Handler.EXPLANATION, "high"): (
        "You are a helpful learning guide. Answer questions about learning paths, explain concepts, and "
        "provide guidance on educational topics. Be clear and informative."
    ),
    (Handler.EXPLANATION, "medium"): (
        "You are a helpful learning guide. Answer questions and provide explanations. "
        "Ask for clarification if the question is unclear."
    ),
    (Handler.CHAT, "low"): (
        "You are a helpful AI assistant. Engage in conversation and help users with their learning journey. "
        "Ask questions to better understand their needs."
    ),
}

_HANDLER_FOR_INTENT: dict[Intent, Handler] = {
    Intent.CREATE_NEW: Handler.CREATION,
    Intent.EDIT_EXISTING: Handler.EDITING,
    Intent.ASK_QUESTION: Handler.EXPLANATION,
}

_QUESTION_TYPES: tuple[tuple[QuestionType, frozenset[str]], ...] = (
    (QuestionType.HOW_TO, frozenset({"how", "explain", "help"})),
    (QuestionType.WHAT_IS, frozenset({"what", "describe", "tell me"})),
    (QuestionType.WHY, frozenset({"why", "reason"})),
    (QuestionType.WHEN, frozenset({"when", "timing"})),
    (QuestionType.WHERE, frozenset({"where", "location"})),
    (QuestionType.WHO, frozenset({"who", "person"})),
)

_HANDLER_DESCRIPTIONS: dict[Handler, str] = {
    Handler.CREATION: "Creates new learning content and structures",
    Handler.EDITING: "Modifies existing learning content using available tools",
    Handler.EXPLANATION: "Provides explanations and answers questions",
    Handler.CHAT: "Engages in general conversation and assistance",
}


def question_type(entities: list[str]) -> QuestionType:
    """Sub-classify a question from its trigger words."""

    found = set(entities)
    for qtype, words in _QUESTION_TYPES:
        if found & words:
            return qtype
    return QuestionType.GENERAL


def route(
    classification: IntentResult,
    current_document: MindMapNode | None,
    *,
    high: float = 0.8,
    medium: float = 0.5,
) -> RouteResult:
    """Choose a handling strategy for a classified message.

    Args:
        classification: Classifier output.
        current_document: The open course outline, if any.
        high: Lower bound of the high confidence band.
        medium: Lower bound of the medium confidence band.

    Returns:
        RouteResult. Mutation tools are only ever enabled for editing with an open document.
    """

    has_document = current_document is not None
    handler = _HANDLER_FOR_INTENT.get(classification.intent)
    band = "high" if classification.confidence >= high else "medium" if classification.confidence >= medium else "low"

    context = RouteContext(
        intent=classification.intent,
        confidence=classification.confidence,
        extracted_entities=list(classification.extracted_entities),
        has_document=has_document,
    )

    if handler is None or band == "low":
        context.needs_clarification = True
        return RouteResult(handler=Handler.CHAT, system_prompt=_PROMPTS[(Handler.CHAT, "low")], context=context)

    allow_tools = False
    if handler is Handler.EDITING:
        allow_tools = has_document
        context.can_edit = has_document
        context.needs_confirmation = band == "medium"
    else:
        context.needs_clarification = band == "medium"
    if handler is Handler.EXPLANATION:
        context.question_type = question_type(classification.extracted_entities)

    return RouteResult(
        handler=handler,
        system_prompt=_PROMPTS[(handler, band)],
        allow_mutation_tools=allow_tools,
        context=context,
    )


def validate_route(route_result: RouteResult, classification: IntentResult, *, high: float = 0.8) -> bool:
    """Sanity-check a routing decision against the classification that produced it."""

    if classification.confidence >= high and route_result.handler is Handler.CHAT:
        if classification.intent is not Intent.GENERAL_CONVERSATION:
            return False
    if classification.intent is Intent.EDIT_EXISTING and route_result.context.can_edit:
        return route_result.allow_mutation_tools
    if classification.intent is not Intent.EDIT_EXISTING:
        return not route_result.allow_mutation_tools
    return True


def handler_description(handler: Handler) -> str:
    return _HANDLER_DESCRIPTIONS.get(handler, "Unknown handler")
