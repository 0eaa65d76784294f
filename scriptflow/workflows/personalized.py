"""Personalized program built from a listener's personal feed."""

from __future__ import annotations

from typing import List

from ..config import ProgramConfig
from ..contracts import PersonalizedProgramScript, SummarizedItem, TriggerPayload
from ..graph import WorkflowGraph
from .prompts import personalized_script_instructions
from .steps import build_program_graph

PERSONALIZED_PROGRAM_WORKFLOW = "PersonalizedProgramScriptGenerationWorkflow"


def _instructions(
    payload: TriggerPayload, summaries: List[SummarizedItem], program: ProgramConfig
) -> str:
    return personalized_script_instructions(
        payload.program_name,
        summaries,
        payload.program_date,
        program,
        user_name=payload.user_name,
        feed_name=payload.feed_name,
        speaker_mode=payload.speaker_mode,
    )


def build_personalized_program_graph(payload: TriggerPayload) -> WorkflowGraph:
    return build_program_graph(
        PERSONALIZED_PROGRAM_WORKFLOW, payload, PersonalizedProgramScript, _instructions
    )
