from __future__ import annotations

import os
from pathlib import Path

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field

from sourceprompt.config import PROMPT_ENV_VAR

ENV_FILE = find_dotenv(usecwd=True)


def default_prompt_source() -> str:
    """Return the prompt file or URL configured in the environment or the `.env` file.

    The process environment wins over the `.env` file. An empty string means the
    built-in prompt is used.
    """
    if PROMPT_ENV_VAR in os.environ:
        return os.environ[PROMPT_ENV_VAR]
    if ENV_FILE:
        return dotenv_values(ENV_FILE).get(PROMPT_ENV_VAR) or ""
    return ""


class Settings(BaseModel):
    """Immutable configuration for one sourceprompt run."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Local directory path or git repository URL.")
    raw: bool = Field(default=False, description="Return just file contents without LLM prompt.")
    verbose: bool = Field(default=False, description="Enable verbose output.")
    output: Path | None = Field(default=None, description="Output file path; stdout when unset.")
    prompt: str = Field(default_factory=default_prompt_source, description="Prompt file path or URL.")
    include: list[str] = Field(default_factory=list, description="Include regular expressions.")
    exclude: list[str] = Field(default_factory=list, description="Exclude regular expressions.")
    log_file: str = Field(default="", description="Log file path.")
    timeout: float = Field(default=30.0, gt=0, description="Timeout in seconds for prompt downloads.")
