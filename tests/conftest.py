"""Shared fixtures: payload builders and scripted generation ports."""

from __future__ import annotations

import asyncio
import inspect
import re
from datetime import date
from typing import Any, Callable, List, Optional

import pytest

from scriptflow.config import ProgramConfig
from scriptflow.contracts import (
    HeadlineTopicScript,
    ItemSummary,
    PersonalizedProgramScript,
    PostDescription,
    TriggerPayload,
)
from scriptflow.errors import OperationCancelled
from scriptflow.generation import GenerationPort
from scriptflow.workflows import ScriptDependencies

_MARKER = re.compile(r"body-(\w+)")


def marker_of(prompt: str) -> str:
    """Return the item marker embedded in a summarize prompt."""
    return _MARKER.search(prompt).group(1)


class ScriptedGenerationPort(GenerationPort):
    """Generation port whose responses come from ``respond(prompt, output_type, instructions)``."""

    def __init__(self, respond: Callable[..., Any]) -> None:
        self.respond = respond
        self.calls: List[tuple] = []
        self.completed: List[str] = []
        self.cancelled: List[str] = []

    async def generate(self, prompt, output_type, *, instructions=None, cancel_token=None):
        self.calls.append((prompt, output_type, instructions))
        try:
            result = self.respond(prompt, output_type, instructions)
            if inspect.isawaitable(result):
                result = await (cancel_token.guard(result) if cancel_token else result)
        except (asyncio.CancelledError, OperationCancelled):
            self.cancelled.append(prompt)
            raise
        self.completed.append(prompt)
        return result


def summary_for(prompt: str, output_type=None, instructions=None) -> ItemSummary:
    marker = marker_of(prompt)
    return ItemSummary(summary=f"summary-{marker}", key_points=[f"point-{marker}"])


def script_for(prompt: str, output_type, instructions: Optional[str] = None):
    ids = re.findall(r"##### Article ID\n\n(\S+)", instructions or "")
    if output_type is PersonalizedProgramScript:
        return PersonalizedProgramScript(
            title="Today's picks",
            opening="Hello",
            posts=[PostDescription(id=i, title=i, description="...") for i in ids],
            ending="Bye",
        )
    return HeadlineTopicScript.model_validate(
        {
            "title": "Today's headlines",
            "opening": "Hello",
            "posts": [
                {"id": i, "title": i, "intro": "", "explanation": "", "summary": ""}
                for i in ids
            ],
            "ending": "Bye",
        }
    )


@pytest.fixture
def make_payload() -> Callable[..., TriggerPayload]:
    def _make(markers=("a", "b", "c"), **overrides) -> TriggerPayload:
        data = {
            "program_name": "Tech Post Cast",
            "program_date": date(2026, 10, 19),
            "items": [
                {
                    "id": f"item-{marker}",
                    "title": f"Title {marker}",
                    "content": f"body-{marker}",
                    "author": f"author-{marker}",
                    "tags": ["python"],
                    "created_at": "2026-10-18T09:00:00Z",
                }
                for marker in markers
            ],
        }
        data.update(overrides)
        return TriggerPayload.model_validate(data)

    return _make


@pytest.fixture
def summarizer() -> ScriptedGenerationPort:
    return ScriptedGenerationPort(summary_for)


@pytest.fixture
def writer() -> ScriptedGenerationPort:
    return ScriptedGenerationPort(script_for)


@pytest.fixture
def script_deps(summarizer, writer) -> ScriptDependencies:
    return ScriptDependencies(summarizer=summarizer, writer=writer, program=ProgramConfig())


@pytest.fixture
def scripted_port() -> type:
    return ScriptedGenerationPort
