"""sourceprompt: turn a codebase into a single LLM prompt."""

__version__ = "1.0.2"
