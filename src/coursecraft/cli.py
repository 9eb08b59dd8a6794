"""CLI entrypoints for coursecraft."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from coursecraft.config import load_settings
from coursecraft.editing.executor import CommandExecutor
from coursecraft.logging import configure_logging, get_logger
from coursecraft.models.mindmap import MindMapNode
from coursecraft.nlu.classifier import classify as classify_utterance
from coursecraft.nlu.grammar import HELP_MESSAGE, parse as parse_utterance
from coursecraft.nlu.router import route
from coursecraft.streaming.splitter import split as split_text

app = typer.Typer(add_completion=False, help="coursecraft course outline command tools")
logger = get_logger(__name__)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _load_document(path: Path) -> MindMapNode:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict) and raw.get("type") == "mindmap" and isinstance(raw.get("data"), dict):
        raw = raw["data"]
    return MindMapNode.from_payload(raw)


@app.callback()
def main() -> None:
    """Configure logging from settings before any command runs."""

    settings = load_settings()
    configure_logging(settings.log_level)


@app.command()
def classify(
    utterance: str = typer.Argument(..., help="User message to classify"),
    has_document: bool = typer.Option(False, "--has-document", help="Pretend a course is open"),
) -> None:
    """Classify a message and show the routing decision."""

    settings = load_settings()
    result = classify_utterance(utterance, has_document)
    placeholder = MindMapNode(id="root", title="Current course") if has_document else None
    decision = route(result, placeholder, high=settings.high_confidence, medium=settings.medium_confidence)
    _echo_json(
        {
            "classification": result.model_dump(mode="json"),
            "route": decision.model_dump(mode="json", exclude={"system_prompt"}),
        }
    )


@app.command()
def parse(utterance: str = typer.Argument(..., help="Editing command")) -> None:
    """Parse an editing command without applying it."""

    command = parse_utterance(utterance)
    if command is None:
        typer.echo(HELP_MESSAGE, err=True)
        raise typer.Exit(code=1)
    _echo_json(command.model_dump(mode="json"))


@app.command()
def edit(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="Course JSON file"),
    utterance: str = typer.Argument(..., help="Editing command"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the new course here"),
) -> None:
    """Apply an editing command to a course JSON file."""

    settings = load_settings()
    tree = _load_document(document)
    outcome = CommandExecutor(settings=settings).execute(utterance, tree)
    if not outcome.success or outcome.document is None:
        typer.echo(outcome.message, err=True)
        raise typer.Exit(code=1)

    logger.info("%s", outcome.message)
    payload = outcome.document.to_payload()
    if output is None:
        _echo_json(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    typer.echo(str(output))


@app.command()
def split(source: Path = typer.Argument(..., exists=True, dir_okay=False, help="AI response text file")) -> None:
    """Separate prose from an embedded course payload."""

    result = split_text(source.read_text(encoding="utf-8"))
    _echo_json(result.model_dump(mode="json"))


if __name__ == "__main__":
    app()
