"""Exception hierarchy for scriptflow."""

from __future__ import annotations

from typing import Optional


class ScriptflowError(Exception):
    """Base class for all scriptflow errors."""


class GraphError(ScriptflowError):
    """Raised when a workflow graph is malformed."""


class DuplicateStepResultError(ScriptflowError):
    """Raised when a step result is written twice within one run."""

    def __init__(self, step_id: str) -> None:
        super().__init__(f"Result for step '{step_id}' was already recorded")
        self.step_id = step_id


class GenerationError(ScriptflowError):
    """Raised when the generation backend fails or returns invalid output."""


class GenerationTimeout(GenerationError):
    """Raised when a single generation call exceeds its timeout."""


class OperationCancelled(ScriptflowError):
    """Raised inside a step when the run's cancellation token has fired."""

    def __init__(self, reason: Optional[str] = None) -> None:
        super().__init__(reason or "Operation cancelled")
        self.reason = reason


class AggregationError(ScriptflowError):
    """Raised when the fan-in step sees fewer summaries than items."""

    def __init__(self, expected: int, actual: int, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or f"Summarized item count mismatch [expected: {expected}, actual: {actual}]"
        )
        self.expected = expected
        self.actual = actual


class EmptyAggregationError(AggregationError):
    """Raised when a script is requested for zero items."""

    def __init__(self) -> None:
        super().__init__(0, 0, "Cannot generate a script without any items")


class RunFailed(ScriptflowError):
    """Wraps the first step failure of a workflow run."""

    def __init__(
        self,
        message: str,
        step_id: Optional[str] = None,
        phase: Optional[str] = None,
        item_index: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.step_id = step_id
        self.phase = phase
        self.item_index = item_index
        self.cause = cause


class RunTimeout(RunFailed):
    """Raised when a run exceeds its overall timeout."""


class RunCancelled(RunFailed):
    """Raised when a run is cancelled from outside."""
