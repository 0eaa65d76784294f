"""Headline topic program: the daily program introducing trending articles."""

from __future__ import annotations

from typing import List

from ..config import ProgramConfig
from ..contracts import HeadlineTopicScript, SummarizedItem, TriggerPayload
from ..graph import WorkflowGraph
from .prompts import headline_script_instructions
from .steps import build_program_graph

HEADLINE_TOPIC_WORKFLOW = "HeadlineTopicProgramScriptGenerationWorkflow"


def _instructions(
    payload: TriggerPayload, summaries: List[SummarizedItem], program: ProgramConfig
) -> str:
    return headline_script_instructions(
        payload.program_name,
        summaries,
        payload.program_date,
        program,
        listener_notes=payload.listener_notes,
        speaker_mode=payload.speaker_mode,
    )


def build_headline_topic_graph(payload: TriggerPayload) -> WorkflowGraph:
    return build_program_graph(
        HEADLINE_TOPIC_WORKFLOW, payload, HeadlineTopicScript, _instructions
    )
