from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from sourceprompt import settings as settings_module
from sourceprompt.config import PROMPT_ENV_VAR
from sourceprompt.settings import Settings, default_prompt_source

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.mark.unit
def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROMPT_ENV_VAR, "")
    settings = Settings(source=".")

    assert settings.source == "."
    assert settings.raw is False
    assert settings.verbose is False
    assert settings.output is None
    assert not settings.prompt
    assert settings.include == []
    assert settings.exclude == []


@pytest.mark.unit
def test_settings_are_immutable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROMPT_ENV_VAR, "")
    settings = Settings(source=".")

    with pytest.raises(ValidationError):
        settings.raw = True  # type: ignore[misc]


@pytest.mark.unit
def test_settings_reject_non_positive_timeout() -> None:
    with pytest.raises(ValidationError):
        Settings(source=".", prompt="", timeout=0)


@pytest.mark.unit
def test_default_prompt_source_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROMPT_ENV_VAR, "https://example.com/prompt.md")

    assert default_prompt_source() == "https://example.com/prompt.md"
    assert Settings(source=".").prompt == "https://example.com/prompt.md"


@pytest.mark.unit
def test_default_prompt_source_reads_dotenv_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    mocker: MockerFixture,
) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(f"{PROMPT_ENV_VAR}=prompts/review.md\n", encoding="utf-8")
    monkeypatch.delenv(PROMPT_ENV_VAR, raising=False)
    mocker.patch.object(settings_module, "ENV_FILE", str(env_file))

    assert default_prompt_source() == "prompts/review.md"


@pytest.mark.unit
def test_default_prompt_source_without_dotenv_file(
    monkeypatch: pytest.MonkeyPatch,
    mocker: MockerFixture,
) -> None:
    monkeypatch.delenv(PROMPT_ENV_VAR, raising=False)
    mocker.patch.object(settings_module, "ENV_FILE", "")

    assert not default_prompt_source()
