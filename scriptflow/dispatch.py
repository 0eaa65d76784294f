"""Script generation dispatcher for scriptflow."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from .cancellation import CancellationToken
from .config import ScriptflowConfig, load_config
from .contracts import TriggerPayload
from .execute import RunExecutor, WorkflowRun
from .generation import GenerationPort, get_generation_port
from .workflows import ScriptDependencies, build_graph

logger = logging.getLogger(__name__)


class ScriptDispatcher:
    """Entry point that builds, runs and discards one graph per request."""

    def __init__(
        self,
        config: Optional[ScriptflowConfig] = None,
        summarizer: Optional[GenerationPort] = None,
        writer: Optional[GenerationPort] = None,
        executor: Optional[RunExecutor] = None,
        model: Optional[str] = None,
    ) -> None:
        self.config = config or load_config()
        self.summarizer = summarizer or get_generation_port(
            model, config=self.config, name="summarizer", purpose="summarize"
        )
        self.writer = writer or get_generation_port(
            model, config=self.config, name="script_writer", purpose="script"
        )
        self.executor = executor or RunExecutor(
            timeout=self.config.run.timeout,
            max_concurrency=self.config.run.max_concurrency,
        )

    def prepare_run(
        self,
        kind: str,
        payload: Union[TriggerPayload, Dict[str, Any]],
        cancel_token: Optional[CancellationToken] = None,
    ) -> WorkflowRun:
        """Validate ``payload`` and build a run without starting it.

        Raises:
            pydantic.ValidationError: If the payload is malformed.
            ValueError: If ``kind`` is unknown.
        """
        if not isinstance(payload, TriggerPayload):
            payload = TriggerPayload.model_validate(payload)

        logger.debug(
            f"Preparing {kind} run: items={[(item.id, item.title) for item in payload.items]}, "
            f"program_name={payload.program_name}, program_date={payload.program_date}, "
            f"speaker_mode={payload.speaker_mode.value}"
        )
        graph = build_graph(kind, payload)
        deps = ScriptDependencies(
            summarizer=self.summarizer, writer=self.writer, program=self.config.program
        )
        return self.executor.create_run(
            graph, payload, deps=deps, cancel_token=cancel_token
        )

    async def generate_script(
        self,
        kind: str,
        payload: Union[TriggerPayload, Dict[str, Any]],
        cancel_token: Optional[CancellationToken] = None,
    ) -> BaseModel:
        """Generate a program script.

        Args:
            kind: Workflow kind, ``"headline"`` or ``"personalized"``.
            payload: Trigger payload or its dict form.
            cancel_token: Optional token to cancel the run from outside.

        Returns:
            The validated script produced by the fan-in step.

        Raises:
            RunFailed: If any step fails; ``step_id``, ``phase`` and
                ``item_index`` identify where.
        """
        run = self.prepare_run(kind, payload, cancel_token=cancel_token)
        logger.info(
            f"Generating {kind} script with {len(run.graph.fan_out_steps)} items (run {run.run_id})"
        )
        script = await self.executor.execute(run)
        logger.info(f"Generated {kind} script '{getattr(script, 'title', '')}' (run {run.run_id})")
        return script
