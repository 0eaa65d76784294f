"""Shared identifiers and defaults."""

SUMMARIZE_STEP_PREFIX = "summarize_"
GENERATE_SCRIPT_STEP = "generate_script"

DEFAULT_PROGRAM_NAME = "Tech Post Cast"
DEFAULT_SUMMARIZE_MODEL = "google-gla:gemini-2.0-flash"
DEFAULT_SCRIPT_MODEL = "google-gla:gemini-2.0-flash"
DEFAULT_OUTPUT_RETRIES = 2
