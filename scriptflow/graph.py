"""Workflow graph: immutable steps plus a fan-out/fan-in builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from pydantic import TypeAdapter

from .errors import GraphError

if TYPE_CHECKING:
    from .execute import StepContext

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")

StepFunction = Callable[["StepContext"], Awaitable[Any]]


@dataclass(frozen=True)
class Step:
    """A named unit of work with declared predecessors and contracts."""

    id: str
    execute: StepFunction
    depends_on: Tuple[str, ...] = ()
    input: Any = None
    input_type: Any = None
    output_type: Any = None
    index: Optional[int] = None
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "depends_on", tuple(self.depends_on))
        if len(set(self.depends_on)) != len(self.depends_on):
            raise GraphError(f"Step '{self.id}' declares a predecessor twice")
        if self.id in self.depends_on:
            raise GraphError(f"Step '{self.id}' cannot depend on itself")
        if self.input_type is not None and self.input is not None:
            validated = TypeAdapter(self.input_type).validate_python(self.input)
            object.__setattr__(self, "input", validated)

    def validate_output(self, output: Any) -> Any:
        """Check ``output`` against the declared output contract."""
        if self.output_type is None:
            return output
        return TypeAdapter(self.output_type).validate_python(output)


@dataclass
class WorkflowGraph:
    """Directed acyclic graph of steps with a single sink.

    Steps must be added after all of their predecessors, so insertion order
    is always a valid topological order.
    """

    name: str
    _steps: Dict[str, Step] = field(default_factory=dict)

    def add_step(self, step: Step) -> Step:
        if step.id in self._steps:
            raise GraphError(f"Duplicate step id '{step.id}' in graph '{self.name}'")
        missing = [dep for dep in step.depends_on if dep not in self._steps]
        if missing:
            raise GraphError(
                f"Step '{step.id}' depends on steps not yet in graph '{self.name}': {missing}"
            )
        self._steps[step.id] = step
        return step

    def get(self, step_id: str) -> Step:
        return self._steps[step_id]

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._steps

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps.values())

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def steps(self) -> List[Step]:
        return list(self._steps.values())

    @property
    def sink(self) -> Step:
        """The single step no other step depends on."""
        referenced = {dep for step in self._steps.values() for dep in step.depends_on}
        sinks = [step for step in self._steps.values() if step.id not in referenced]
        if len(sinks) != 1:
            raise GraphError(
                f"Graph '{self.name}' must have exactly one sink, found {[s.id for s in sinks]}"
            )
        return sinks[0]

    @property
    def fan_out_steps(self) -> List[Step]:
        sink_id = self.sink.id
        return [step for step in self._steps.values() if step.id != sink_id]

    def validate(self) -> None:
        """Ensure the graph has one sink that joins every other step."""
        sink = self.sink
        expected = {step.id for step in self.fan_out_steps}
        if set(sink.depends_on) != expected:
            raise GraphError(
                f"Sink '{sink.id}' of graph '{self.name}' must depend on all fan-out "
                f"steps; missing {sorted(expected - set(sink.depends_on))}"
            )

    @classmethod
    def fan_out_fan_in(
        cls,
        name: str,
        items: Sequence[ItemT],
        fan_out: Callable[[int, ItemT], Step],
        fan_in: Callable[[Tuple[str, ...]], Step],
    ) -> "WorkflowGraph":
        """Build one fan-out step per item joined by a single fan-in step.

        Args:
            name: Graph name used in logs and errors.
            items: Ordered items; item ``i`` becomes the fan-out step built by
                ``fan_out(i, item)``.
            fan_in: Receives the fan-out step ids in item order and returns the
                sink. It must declare all of them as predecessors.
        """
        graph = cls(name=name)
        fan_out_ids = []
        for index, item in enumerate(items):
            step = graph.add_step(fan_out(index, item))
            fan_out_ids.append(step.id)
        graph.add_step(fan_in(tuple(fan_out_ids)))
        graph.validate()
        logger.debug(
            f"Built graph '{name}' with {len(fan_out_ids)} fan-out steps and sink '{graph.sink.id}'"
        )
        return graph
