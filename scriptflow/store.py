"""Run-scoped store of step results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional

from .errors import DuplicateStepResultError


class StepOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class StepResult:
    """Completion record of one step."""

    status: StepOutcome
    output: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, output: Any) -> "StepResult":
        return cls(status=StepOutcome.SUCCESS, output=output)

    @classmethod
    def failure(cls, error: BaseException) -> "StepResult":
        return cls(status=StepOutcome.FAILURE, error=error)

    @property
    def ok(self) -> bool:
        return self.status is StepOutcome.SUCCESS


class StepResultStore:
    """Write-once map from step id to result, owned by a single run."""

    def __init__(self) -> None:
        self._results: Dict[str, StepResult] = {}

    def put(self, step_id: str, result: StepResult) -> None:
        if step_id in self._results:
            raise DuplicateStepResultError(step_id)
        self._results[step_id] = result

    def get(self, step_id: str) -> Optional[StepResult]:
        return self._results.get(step_id)

    def all_present(self, step_ids: Iterable[str]) -> bool:
        return all(step_id in self._results for step_id in step_ids)

    def all_succeeded(self, step_ids: Iterable[str]) -> bool:
        return all(self.is_success(step_id) for step_id in step_ids)

    def is_success(self, step_id: str) -> bool:
        result = self._results.get(step_id)
        return result is not None and result.ok

    def view(self, step_ids: Iterable[str]) -> "StepResultView":
        return StepResultView(self, step_ids)

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._results

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)


class StepResultView:
    """Read-only access to the outputs of a step's declared predecessors."""

    def __init__(self, store: StepResultStore, step_ids: Iterable[str]) -> None:
        self._store = store
        self._scope = frozenset(step_ids)

    @property
    def scope(self) -> frozenset:
        return self._scope

    def output(self, step_id: str) -> Any:
        """Return the successful output of ``step_id`` or ``None`` if absent.

        Raises:
            KeyError: If ``step_id`` is not a declared predecessor.
        """
        if step_id not in self._scope:
            raise KeyError(f"Step '{step_id}' is not a declared predecessor")
        result = self._store.get(step_id)
        if result is None or not result.ok:
            return None
        return result.output
