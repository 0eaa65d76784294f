from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_OUTPUT_RETRIES,
    DEFAULT_PROGRAM_NAME,
    DEFAULT_SCRIPT_MODEL,
    DEFAULT_SUMMARIZE_MODEL,
)


class GenerationConfig(BaseModel):
    """Settings for the text generation backend."""

    summarize_model: str = DEFAULT_SUMMARIZE_MODEL
    script_model: str = DEFAULT_SCRIPT_MODEL
    timeout: Optional[float] = 120.0
    output_retries: int = DEFAULT_OUTPUT_RETRIES


class RunConfig(BaseModel):
    """Settings for workflow execution."""

    timeout: Optional[float] = None
    max_concurrency: Optional[int] = Field(default=None, ge=1)


class ProgramConfig(BaseModel):
    """Defaults and length bounds used when assembling script prompts."""

    program_name: str = DEFAULT_PROGRAM_NAME
    min_script_chars: int = 3000
    max_script_chars: int = 4500
    min_item_chars: int = 1000
    max_item_chars: int = 1200


class ScriptflowConfig(BaseModel):
    """Top-level configuration model."""

    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    program: ProgramConfig = Field(default_factory=ProgramConfig)
    log_level: str = "INFO"


def load_config(path: Optional[str] = None) -> ScriptflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to SCRIPTFLOW_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("SCRIPTFLOW_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = ScriptflowConfig(**data)
    else:
        config = ScriptflowConfig()

    if summarize_model := os.getenv("SCRIPTFLOW_SUMMARIZE_MODEL"):
        config.generation.summarize_model = summarize_model
    if script_model := os.getenv("SCRIPTFLOW_SCRIPT_MODEL"):
        config.generation.script_model = script_model
    if log_level := os.getenv("SCRIPTFLOW_LOG_LEVEL"):
        config.log_level = log_level
    return config
