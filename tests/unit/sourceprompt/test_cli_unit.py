from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from sourceprompt import __version__, cli
from sourceprompt.config import DEFAULT_PROMPT, PROMPT_ENV_VAR
from sourceprompt.exceptions import PatternCompileError
from sourceprompt.logging import setup_logging

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


@pytest.mark.unit
def test_parse_args_parses_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROMPT_ENV_VAR, "")
    settings = cli.parse_args(
        [
            "./project",
            "-r",
            "-v",
            "-o",
            "out/prompt.md",
            "-i",
            "\\.go$",
            "--include",
            "\\.py$",
            "-e",
            "_test\\.go$",
        ],
    )

    assert settings.source == "./project"
    assert settings.raw is True
    assert settings.verbose is True
    assert settings.output == Path("out/prompt.md")
    assert settings.include == ["\\.go$", "\\.py$"]
    assert settings.exclude == ["_test\\.go$"]
    assert not settings.prompt


@pytest.mark.unit
def test_parse_args_prompt_flag_overrides_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROMPT_ENV_VAR, "from-env.md")

    assert cli.parse_args(["."]).prompt == "from-env.md"
    assert cli.parse_args([".", "-p", "flag.md"]).prompt == "flag.md"


@pytest.mark.unit
def test_parse_args_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.parse_args(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out


@pytest.mark.unit
def test_main_version_subcommand(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["version"]) == 0
    assert capsys.readouterr().out == f"sourceprompt version {__version__}\n"


@pytest.mark.unit
def test_parse_args_requires_a_path() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args([])


@pytest.mark.unit
def test_run_prepends_default_prompt(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROMPT_ENV_VAR, "")
    (tmp_path / "a.go").write_text("package main\n", encoding="utf-8")

    text = cli.run(cli.parse_args([str(tmp_path)]))

    assert text == f"{DEFAULT_PROMPT}\n\n`a.go`\n\n```go\npackage main\n```\n\n"


@pytest.mark.unit
def test_run_compiles_patterns_before_touching_sources(mocker: MockerFixture) -> None:
    materialize = mocker.patch.object(cli, "materialize_source")
    resolve = mocker.patch.object(cli, "resolve_prompt")

    with pytest.raises(PatternCompileError):
        cli.run(cli.parse_args(["https://github.com/user/repo", "-i", "[unclosed", "-p", "x"]))

    materialize.assert_not_called()
    resolve.assert_not_called()


@pytest.mark.unit
def test_main_returns_error_code_on_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(PROMPT_ENV_VAR, "")

    assert cli.main([str(tmp_path / "missing")]) == 1


@pytest.mark.unit
def test_main_does_not_write_output_on_failure(tmp_path: Path, mocker: MockerFixture) -> None:
    write_output = mocker.patch.object(cli, "write_output")

    exit_code = cli.main([str(tmp_path), "-p", str(tmp_path / "missing-prompt.md")])

    assert exit_code == 1
    write_output.assert_not_called()


@pytest.mark.unit
@pytest.mark.parametrize("timeout", ["0", "-5", "soon"])
def test_parse_args_rejects_invalid_timeout(timeout: str, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.parse_args([".", "--timeout", timeout])

    assert exc_info.value.code == 2
    assert "--timeout" in capsys.readouterr().err


@pytest.mark.unit
def test_parse_args_accepts_positive_timeout() -> None:
    assert cli.parse_args([".", "--raw", "--timeout", "2.5"]).timeout == 2.5  # noqa: PLR2004


@pytest.mark.unit
def test_main_returns_error_code_when_walk_fails(tmp_path: Path) -> None:
    (tmp_path / "a.go").write_text("package main\n", encoding="utf-8")
    (tmp_path / "broken.txt").symlink_to(tmp_path / "missing-target.txt")
    output = tmp_path.parent / f"{tmp_path.name}-out.md"

    assert cli.main([str(tmp_path), "--raw", "-o", str(output)]) == 1
    assert not output.exists()


@pytest.mark.unit
def test_main_creates_log_file_directory(tmp_path: Path) -> None:
    (tmp_path / "a.go").write_text("package main\n", encoding="utf-8")
    log_file = tmp_path.parent / f"{tmp_path.name}-logs" / "nested" / "run.log"
    output = tmp_path.parent / f"{tmp_path.name}-log-out.md"

    try:
        exit_code = cli.main([str(tmp_path), "--raw", "-v", "--log-file", str(log_file), "-o", str(output)])
    finally:
        setup_logging()

    assert exit_code == 0
    assert log_file.exists()
    assert "a.go" in log_file.read_text(encoding="utf-8")
