"""Program workflows and the graph builder lookup."""

from __future__ import annotations

from typing import Callable, Dict

from ..contracts import TriggerPayload
from ..graph import WorkflowGraph
from .headline import build_headline_topic_graph
from .personalized import build_personalized_program_graph
from .steps import (
    ScriptDependencies,
    collect_summaries,
    make_script_step,
    make_summarize_step,
    summarize_step_id,
)

GRAPH_BUILDERS: Dict[str, Callable[[TriggerPayload], WorkflowGraph]] = {
    "headline": build_headline_topic_graph,
    "personalized": build_personalized_program_graph,
}


def build_graph(kind: str, payload: TriggerPayload) -> WorkflowGraph:
    """Build a fresh graph for the workflow ``kind`` sized to ``payload.items``."""
    try:
        builder = GRAPH_BUILDERS[kind]
    except KeyError:
        raise ValueError(
            f"Unsupported workflow kind: {kind}. Expected one of {sorted(GRAPH_BUILDERS)}"
        ) from None
    return builder(payload)


__all__ = [
    "GRAPH_BUILDERS",
    "ScriptDependencies",
    "build_graph",
    "build_headline_topic_graph",
    "build_personalized_program_graph",
    "collect_summaries",
    "make_script_step",
    "make_summarize_step",
    "summarize_step_id",
]
