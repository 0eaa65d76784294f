"""Command line interface for running scriptflow workflows."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from scriptflow import ScriptDispatcher, TriggerPayload, build_graph, load_config
from scriptflow.errors import RunFailed, ScriptflowError

app = typer.Typer(help="CLI for scriptflow script generation workflows")


def _load_payload(payload_file: Path) -> TriggerPayload:
    if not payload_file.exists():
        typer.secho(f"Payload file not found: {payload_file}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    try:
        return TriggerPayload.model_validate(json.loads(payload_file.read_text()))
    except (ValidationError, json.JSONDecodeError) as e:
        typer.secho(f"Invalid payload: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.callback()
def main() -> None:
    """scriptflow CLI entry point."""
    pass


@app.command("generate")
def generate(
    kind: str,
    payload_file: Path,
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to a YAML config file"
    ),
    model: Optional[str] = typer.Option(
        None, help="Model used for both summaries and the script, e.g. 'test'"
    ),
) -> None:
    """
    Generate a program script and print it as JSON.

    Builds a graph with one summarize step per item and a single script step,
    runs it and prints the resulting script.

    Args:
        kind: Workflow kind, "headline" or "personalized"
        payload_file: JSON file with the trigger payload
        config_path: Optional YAML config file
        model: Optional model overriding the configured ones

    Example:
        scriptflow generate headline payload.json
        scriptflow generate personalized payload.json --model test
    """
    config = load_config(str(config_path) if config_path else None)
    logging.basicConfig(level=config.log_level.upper())

    payload = _load_payload(payload_file)
    dispatcher = ScriptDispatcher(config=config, model=model)
    try:
        script = asyncio.run(dispatcher.generate_script(kind, payload))
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except RunFailed as e:
        typer.secho(f"Script generation failed: {e}", fg=typer.colors.RED)
        if e.cause is not None:
            typer.secho(f"Cause: {e.cause}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except ScriptflowError as e:
        typer.secho(f"Script generation failed: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.echo(script.model_dump_json(indent=2))


@app.command("graph")
def graph(kind: str, payload_file: Path) -> None:
    """Show the steps a payload would produce without running them."""
    payload = _load_payload(payload_file)
    try:
        workflow = build_graph(kind, payload)
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.echo(f"{workflow.name} ({len(workflow.fan_out_steps)} fan-out steps)")
    for step in workflow:
        deps = ", ".join(step.depends_on) if step.depends_on else "-"
        typer.echo(f"{step.id}\t<- {deps}")


if __name__ == "__main__":
    app()
