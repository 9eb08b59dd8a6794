"""Natural-language understanding: intent, routing, command grammar, title resolution."""

from __future__ import annotations

from coursecraft.nlu.classifier import classify, confidence_band, is_confident
from coursecraft.nlu.grammar import HELP_MESSAGE, RULES, GrammarRule, parse, parse_strict
from coursecraft.nlu.resolver import find_id_by_title, resolve, resolve_parameters
from coursecraft.nlu.router import handler_description, route, validate_route

__all__ = [
    "HELP_MESSAGE",
    "RULES",
    "GrammarRule",
    "classify",
    "confidence_band",
    "find_id_by_title",
    "handler_description",
    "is_confident",
    "parse",
    "parse_strict",
    "resolve",
    "resolve_parameters",
    "route",
    "validate_route",
]
