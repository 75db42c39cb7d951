"""
sourceprompt: convert a codebase into an LLM prompt.

Overview
--------
Every text file of a local directory, or of a git repository cloned on the fly, is
rendered as a fenced markdown block labeled with its path. The blocks are preceded
by an instructional prompt: the built-in one, a local file, or a URL (`--prompt`,
or `SOURCEPROMPT_PROMPT` in the environment / `.env`). `--raw` drops the prompt.

Hidden paths (starting with `.`) and binary files are skipped. `--include` and
`--exclude` take regular expressions matched against the repository-relative path;
both may be repeated, and an exclude always wins.

Usage
-----
    sourceprompt ./my-project -o prompt.md
    sourceprompt https://github.com/user/repo -i "\\.go$" -e "_test\\.go$"
    sourceprompt . --raw --verbose
    sourceprompt version
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from sourceprompt import __version__
from sourceprompt.exceptions import SourcePromptError
from sourceprompt.file_manipulation import compile_patterns
from sourceprompt.logging import logger, setup_logging
from sourceprompt.output_construction import assemble_output, render_tree
from sourceprompt.settings import Settings
from sourceprompt.sources import materialize_source, resolve_prompt, write_output

if TYPE_CHECKING:
    from collections.abc import Sequence

VERSION_COMMAND = "version"


def positive_float(value: str) -> float:
    """Argparse type for strictly positive numbers of seconds."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sourceprompt",
        description=(
            "Converts your codebase into LLM prompt. "
            "Accepts local directory path or git repo URL as an argument."
        ),
    )
    p.add_argument("source", metavar="path", help="Local directory path or git repository URL.")
    p.add_argument("--version", action="version", version=f"sourceprompt version {__version__}")
    p.add_argument(
        "-r",
        "--raw",
        action="store_true",
        help="Return just file contents without LLM prompt.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output.")
    p.add_argument("-o", "--output", type=Path, default=None, help="Output file path.")
    p.add_argument(
        "-p",
        "--prompt",
        type=str,
        default=None,
        help="Prompt file path or URL.",
    )
    p.add_argument(
        "-i",
        "--include",
        action="append",
        default=[],
        help="Regular expression of filename patterns to include (repeatable).",
    )
    p.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        help="Regular expression of filename patterns to exclude (repeatable).",
    )
    p.add_argument("--log-file", type=str, default="", help="Log file path.")
    p.add_argument(
        "--timeout",
        type=positive_float,
        default=30.0,
        help="Timeout in seconds when downloading a prompt.",
    )
    return p


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    args = vars(build_parser().parse_args(argv))
    if args["prompt"] is None:
        del args["prompt"]
    return Settings(**args)


def run(settings: Settings) -> str:
    """Build the full artifact for `settings`.

    Patterns and the prompt are resolved before the tree is touched, so a bad
    expression or an unreachable prompt fails fast.

    Raises:
        SourcePromptError: on any failure; no partial artifact is returned.
    """
    includes = compile_patterns(settings.include)
    excludes = compile_patterns(settings.exclude)
    header = resolve_prompt(settings)

    logger.debug("Processing", source=settings.source)
    with materialize_source(settings.source) as (root, prefix):
        body = render_tree(root, prefix, includes, excludes)
    return assemble_output(body, header)


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv == [VERSION_COMMAND]:
        print(f"sourceprompt version {__version__}")
        return 0

    settings = parse_args(argv)
    setup_logging(settings.log_file or None, verbose=settings.verbose)

    try:
        text = run(settings)
        write_output(text, settings.output)
    except SourcePromptError as e:
        logger.error(str(e), error=type(e).__name__)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
