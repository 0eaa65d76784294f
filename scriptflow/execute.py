"""Run executor for workflow graphs."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .cancellation import CancellationToken
from .errors import GraphError, OperationCancelled, RunCancelled, RunFailed, RunTimeout
from .graph import Step, WorkflowGraph
from .store import StepResult, StepResultStore, StepResultView

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RunStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class StepContext:
    """Everything a step body may read while it executes."""

    step_id: str
    input: Any
    trigger: Any
    results: StepResultView
    deps: Any
    cancel_token: CancellationToken


class WorkflowRun:
    """One execution of a graph against one trigger payload."""

    def __init__(
        self,
        graph: WorkflowGraph,
        trigger: Any,
        deps: Any = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        self.run_id = str(uuid.uuid4())
        self.graph = graph
        self.trigger = trigger
        self.deps = deps
        self.cancel_token = cancel_token or CancellationToken()
        self.store = StepResultStore()
        self.status = RunStatus.PENDING
        self.step_status: Dict[str, StepStatus] = {
            step.id: StepStatus.PENDING for step in graph
        }
        self.error: Optional[BaseException] = None
        self.started_at: Optional[datetime] = None
        self.completed_at: Optional[datetime] = None

    def cancel(self, reason: str = "cancelled by caller") -> None:
        """Request cancellation; in-flight steps are stopped."""
        self.cancel_token.cancel(reason)

    @property
    def output(self) -> Any:
        result = self.store.get(self.graph.sink.id)
        return result.output if result is not None and result.ok else None

    def _finish(self, status: RunStatus, error: Optional[BaseException] = None) -> None:
        self.status = status
        self.error = error
        self.completed_at = datetime.now(timezone.utc)


class RunExecutor:
    """Schedules graph steps as soon as all their predecessors succeeded.

    Independent steps run concurrently on the event loop. The first failing
    step aborts the run: the cancellation token fires, in-flight siblings are
    cancelled and a ``RunFailed`` naming the step is raised.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_concurrency: Optional[int] = None,
    ) -> None:
        self.timeout = timeout
        self.max_concurrency = max_concurrency

    def create_run(
        self,
        graph: WorkflowGraph,
        trigger: Any,
        deps: Any = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> WorkflowRun:
        graph.validate()
        return WorkflowRun(graph, trigger, deps=deps, cancel_token=cancel_token)

    async def run(self, graph: WorkflowGraph, trigger: Any, deps: Any = None) -> Any:
        """Execute ``graph`` and return the sink step's output."""
        return await self.execute(self.create_run(graph, trigger, deps=deps))

    async def execute(self, run: WorkflowRun) -> Any:
        if run.status is not RunStatus.PENDING:
            raise RuntimeError(f"Run {run.run_id} was already started")

        run.status = RunStatus.RUNNING
        run.started_at = datetime.now(timezone.utc)
        logger.info(
            f"Starting run {run.run_id} of graph '{run.graph.name}' with {len(run.graph)} steps"
        )
        try:
            if self.timeout is not None:
                output = await asyncio.wait_for(self._drive(run), self.timeout)
            else:
                output = await self._drive(run)
        except asyncio.TimeoutError as exc:
            run.cancel_token.cancel("run timed out")
            error = RunTimeout(
                f"Run {run.run_id} of graph '{run.graph.name}' timed out after {self.timeout}s",
                cause=exc,
            )
            logger.error(str(error))
            run._finish(RunStatus.FAILED, error)
            raise error from exc
        except (RunFailed, GraphError) as exc:
            run._finish(RunStatus.FAILED, exc)
            raise
        except BaseException as exc:
            run.cancel_token.cancel("run aborted")
            logger.error(f"Run {run.run_id} of graph '{run.graph.name}' aborted: {exc!r}")
            run._finish(RunStatus.FAILED, exc)
            raise

        run._finish(RunStatus.SUCCESS)
        logger.info(f"Run {run.run_id} of graph '{run.graph.name}' completed")
        return output

    async def _drive(self, run: WorkflowRun) -> Any:
        sink = run.graph.sink
        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        )
        running: Dict[asyncio.Task, Step] = {}
        cancel_waiter = asyncio.ensure_future(run.cancel_token.wait())
        try:
            while True:
                for step in self._eligible(run):
                    run.step_status[step.id] = StepStatus.RUNNING
                    task = asyncio.ensure_future(self._invoke(run, step, semaphore))
                    running[task] = step
                    logger.debug(f"Launched step '{step.id}' in run {run.run_id}")

                if run.store.is_success(sink.id):
                    return run.store.get(sink.id).output

                if not running:
                    raise GraphError(
                        f"Run {run.run_id} stalled: no runnable steps left before '{sink.id}'"
                    )

                done, _ = await asyncio.wait(
                    [*running, cancel_waiter], return_when=asyncio.FIRST_COMPLETED
                )

                if cancel_waiter in done:
                    reason = run.cancel_token.reason or "cancelled"
                    error = RunCancelled(f"Run {run.run_id} cancelled: {reason}")
                    logger.warning(str(error))
                    raise error

                for task in [t for t in running if t in done]:
                    self._record(run, running.pop(task), task)
        finally:
            cancel_waiter.cancel()
            await self._cancel_in_flight(run, running)

    def _eligible(self, run: WorkflowRun) -> List[Step]:
        return [
            step
            for step in run.graph
            if run.step_status[step.id] is StepStatus.PENDING
            and run.store.all_succeeded(step.depends_on)
        ]

    async def _invoke(
        self, run: WorkflowRun, step: Step, semaphore: Optional[asyncio.Semaphore]
    ) -> Any:
        context = StepContext(
            step_id=step.id,
            input=step.input,
            trigger=run.trigger,
            results=run.store.view(step.depends_on),
            deps=run.deps,
            cancel_token=run.cancel_token,
        )
        if semaphore is None:
            output = await step.execute(context)
        else:
            async with semaphore:
                output = await step.execute(context)
        return step.validate_output(output)

    def _record(self, run: WorkflowRun, step: Step, task: asyncio.Task) -> None:
        if task.cancelled():
            run.step_status[step.id] = StepStatus.CANCELLED
            return

        exc = task.exception()
        if exc is None:
            run.store.put(step.id, StepResult.success(task.result()))
            run.step_status[step.id] = StepStatus.SUCCESS
            logger.debug(f"Step '{step.id}' succeeded in run {run.run_id}")
            return

        run.store.put(step.id, StepResult.failure(exc))
        run.step_status[step.id] = StepStatus.FAILED
        run.cancel_token.cancel(f"step '{step.id}' failed")
        error = self._wrap_failure(run, step, exc)
        logger.error(f"{error}: {exc!r}")
        raise error from exc

    def _wrap_failure(
        self, run: WorkflowRun, step: Step, exc: BaseException
    ) -> RunFailed:
        if step.id == run.graph.sink.id:
            phase = "fan-in"
            where = f"fan-in step '{step.id}'"
        else:
            phase = "fan-out"
            where = (
                f"fan-out index {step.index} ('{step.id}')"
                if step.index is not None
                else f"fan-out step '{step.id}'"
            )
        return RunFailed(
            f"Generation failed at {where} in run {run.run_id}",
            step_id=step.id,
            phase=phase,
            item_index=step.index,
            cause=exc,
        )

    async def _cancel_in_flight(
        self, run: WorkflowRun, running: Dict[asyncio.Task, Step]
    ) -> None:
        if not running:
            return
        for task in running:
            task.cancel()
        await asyncio.gather(*running, return_exceptions=True)
        for task, step in running.items():
            if task.cancelled() or isinstance(task.exception(), OperationCancelled):
                run.step_status[step.id] = StepStatus.CANCELLED
            elif task.exception() is not None:
                run.step_status[step.id] = StepStatus.FAILED
            else:
                run.store.put(step.id, StepResult.success(task.result()))
                run.step_status[step.id] = StepStatus.SUCCESS
        cancelled = sorted(
            step.id
            for step in running.values()
            if run.step_status[step.id] is StepStatus.CANCELLED
        )
        if cancelled:
            logger.info(
                f"Cancelled {len(cancelled)} in-flight steps of run {run.run_id}: {cancelled}"
            )
