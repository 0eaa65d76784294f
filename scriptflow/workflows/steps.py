"""Step bodies shared by every program workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel

from ..config import ProgramConfig
from ..constants import GENERATE_SCRIPT_STEP, SUMMARIZE_STEP_PREFIX
from ..contracts import ContentItem, ItemSummary, SummarizedItem, TriggerPayload
from ..errors import AggregationError, EmptyAggregationError
from ..execute import StepContext
from ..generation import GenerationPort
from ..graph import Step, WorkflowGraph
from .prompts import SCRIPT_REQUEST, SUMMARIZE_INSTRUCTIONS, summarize_prompt

logger = logging.getLogger(__name__)

ScriptT = TypeVar("ScriptT", bound=BaseModel)

InstructionBuilder = Callable[[TriggerPayload, List[SummarizedItem], ProgramConfig], str]


@dataclass
class ScriptDependencies:
    """Services available to step bodies through ``StepContext.deps``."""

    summarizer: GenerationPort
    writer: GenerationPort
    program: ProgramConfig


def summarize_step_id(index: int) -> str:
    return f"{SUMMARIZE_STEP_PREFIX}{index}"


def make_summarize_step(index: int, item: ContentItem) -> Step:
    """Fan-out step summarizing the item at ``index``."""

    async def summarize(ctx: StepContext) -> SummarizedItem:
        deps: ScriptDependencies = ctx.deps
        post: ContentItem = ctx.input
        logger.info(f"Summarizing item {post.id} ({ctx.step_id})")
        summary = await deps.summarizer.generate(
            summarize_prompt(post),
            ItemSummary,
            instructions=SUMMARIZE_INSTRUCTIONS,
            cancel_token=ctx.cancel_token,
        )
        logger.info(f"Summarized item {post.id} ({ctx.step_id})")
        return SummarizedItem.from_item(post, summary)

    return Step(
        id=summarize_step_id(index),
        execute=summarize,
        input=item,
        input_type=ContentItem,
        output_type=SummarizedItem,
        index=index,
        description=f"Summarize item {index}",
    )


def collect_summaries(ctx: StepContext, expected: int) -> List[SummarizedItem]:
    """Read the summaries of items ``0..expected-1`` in item order.

    Raises:
        AggregationError: If any summary is missing.
    """
    summaries = []
    for index in range(expected):
        output = ctx.results.output(summarize_step_id(index))
        if output is not None:
            summaries.append(output)

    if len(summaries) != expected:
        error = AggregationError(expected, len(summaries))
        logger.error(str(error))
        raise error
    return summaries


def make_script_step(
    output_type: Type[ScriptT],
    item_count: int,
    depends_on: Sequence[str],
    build_instructions: InstructionBuilder,
) -> Step:
    """Fan-in step writing the final script from every summary."""

    async def generate_script(ctx: StepContext) -> ScriptT:
        deps: ScriptDependencies = ctx.deps
        if item_count == 0:
            raise EmptyAggregationError()

        summaries = collect_summaries(ctx, item_count)
        instructions = build_instructions(ctx.trigger, summaries, deps.program)
        logger.info(f"Generating {output_type.__name__} from {item_count} summaries")
        logger.debug(f"Script instructions: {instructions}")
        script = await deps.writer.generate(
            SCRIPT_REQUEST,
            output_type,
            instructions=instructions,
            cancel_token=ctx.cancel_token,
        )
        _check_coverage(script, summaries)
        return script

    return Step(
        id=GENERATE_SCRIPT_STEP,
        execute=generate_script,
        depends_on=tuple(depends_on),
        output_type=output_type,
        description=f"Generate {output_type.__name__}",
    )


def _check_coverage(script: BaseModel, summaries: Sequence[SummarizedItem]) -> None:
    posts = getattr(script, "posts", None)
    if posts is None:
        return
    expected = [item.id for item in summaries]
    actual = [post.id for post in posts]
    if actual != expected:
        logger.warning(
            f"Script sections do not match the items [expected: {expected}, actual: {actual}]"
        )


def build_program_graph(
    name: str,
    payload: TriggerPayload,
    output_type: Type[ScriptT],
    build_instructions: InstructionBuilder,
) -> WorkflowGraph:
    """Build a fan-out/fan-in graph sized to ``payload.items``."""

    def fan_in(fan_out_ids: Tuple[str, ...]) -> Step:
        return make_script_step(
            output_type, len(payload.items), fan_out_ids, build_instructions
        )

    return WorkflowGraph.fan_out_fan_in(name, payload.items, make_summarize_step, fan_in)
