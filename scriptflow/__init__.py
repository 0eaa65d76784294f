"""scriptflow: fan-out/fan-in script generation workflows for podcast programs."""

from .cancellation import CancellationToken
from .config import ScriptflowConfig, load_config
from .contracts import (
    ContentItem,
    HeadlineTopicScript,
    ListenerNote,
    PersonalizedProgramScript,
    SpeakerMode,
    SummarizedItem,
    TriggerPayload,
)
from .dispatch import ScriptDispatcher
from .errors import AggregationError, GenerationError, RunFailed, ScriptflowError
from .execute import RunExecutor, StepContext, WorkflowRun
from .generation import GenerationPort, get_generation_port
from .graph import Step, WorkflowGraph
from .store import StepResult, StepResultStore
from .workflows import build_graph

__version__ = "0.1.0"
__all__ = [
    "AggregationError",
    "CancellationToken",
    "ContentItem",
    "GenerationError",
    "GenerationPort",
    "HeadlineTopicScript",
    "ListenerNote",
    "PersonalizedProgramScript",
    "RunExecutor",
    "RunFailed",
    "ScriptDispatcher",
    "ScriptflowConfig",
    "ScriptflowError",
    "SpeakerMode",
    "Step",
    "StepContext",
    "StepResult",
    "StepResultStore",
    "SummarizedItem",
    "TriggerPayload",
    "WorkflowGraph",
    "WorkflowRun",
    "build_graph",
    "get_generation_port",
    "load_config",
]
