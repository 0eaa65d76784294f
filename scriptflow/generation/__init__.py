"""Generation port factory and implementations."""

from __future__ import annotations

import os
from typing import Optional

from ..config import ScriptflowConfig, load_config
from .agent import AgentGenerationPort
from .base import GenerationPort


def get_generation_port(
    model: Optional[str] = None,
    config: Optional[ScriptflowConfig] = None,
    name: Optional[str] = None,
    purpose: str = "script",
) -> GenerationPort:
    """Factory function to get a generation port for ``model``.

    The model falls back to ``SCRIPTFLOW_MODEL`` and then to the configured
    model for ``purpose`` (``"summarize"`` or ``"script"``).
    """

    config = config or load_config()
    if purpose == "summarize":
        configured = config.generation.summarize_model
    elif purpose == "script":
        configured = config.generation.script_model
    else:
        raise ValueError(f"Unsupported generation purpose: {purpose}")

    model = model or os.getenv("SCRIPTFLOW_MODEL") or configured
    return AgentGenerationPort(
        model,
        timeout=config.generation.timeout,
        output_retries=config.generation.output_retries,
        name=name,
    )


__all__ = ["AgentGenerationPort", "GenerationPort", "get_generation_port"]
