"""Input and output collaborators of the renderer.

Resolving the tree to render (local path or git clone), loading the prompt header
(built-in, file or URL) and writing the final artifact.
"""

from __future__ import annotations

import os
import subprocess  # noqa: S404
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx

from sourceprompt.config import DEFAULT_PROMPT
from sourceprompt.exceptions import GitCommandError, InvalidSourceError, OutputWriteError, PromptSourceError
from sourceprompt.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sourceprompt.settings import Settings

CLONE_DIR_PREFIX = "sourceprompt-git-clone-"


def is_url(value: str) -> bool:
    """Check if `value` looks like a URL, i.e. has both a scheme and a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def clone_repository(url: str, destination: str | Path) -> None:
    """Clone `url` into `destination` with the git executable.

    Args:
        url (str): the repository to clone
        destination (str | Path): an empty or missing directory

    Raises:
        GitCommandError: if git is missing or exits with a non-zero status.
    """
    command = ["git", "clone", url, str(destination)]
    logger.debug("Cloning using git", url=url, destination=str(destination))
    try:
        result = subprocess.run(  # noqa: S603
            command,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise GitCommandError(command=" ".join(command), returncode=-1, stdout="", stderr=str(exc)) from exc
    if result.returncode != 0:
        raise GitCommandError(
            command=" ".join(command),
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    logger.debug("Repository cloned successfully", destination=str(destination))


@contextmanager
def materialize_source(source: str) -> Iterator[tuple[str, str]]:
    """Provide a local directory for `source` and the prefix to strip from its paths.

    A local path is used in place and is its own prefix. A URL is cloned into a
    temporary directory which is removed when the context exits, whether or not the
    body raised.

    Args:
        source (str): a local path or a git repository URL

    Raises:
        InvalidSourceError: if `source` is not a URL and does not exist locally.
        GitCommandError: if cloning fails.

    Yields:
        Iterator[tuple[str, str]]: `(root, prefix_to_strip)`
    """
    if not is_url(source):
        if not os.path.exists(source):
            raise InvalidSourceError(source=source)
        yield source, source
        return

    with tempfile.TemporaryDirectory(prefix=CLONE_DIR_PREFIX) as temp_dir:
        clone_repository(source, temp_dir)
        yield temp_dir, temp_dir
    logger.debug("Temporary directory removed", temp_dir=temp_dir)


def read_prompt_source(source: str, timeout: float = 30.0) -> str:
    """Load a custom prompt from a URL or a local file.

    Args:
        source (str): a URL or a file path
        timeout (float): seconds to wait for the HTTP response

    Raises:
        PromptSourceError: if the file cannot be read, the request fails, or the
            response status is not a success.

    Returns:
        str: the prompt text
    """
    if is_url(source):
        logger.debug("Downloading prompt file", url=source)
        try:
            response = httpx.get(source, follow_redirects=True, timeout=timeout)
        except httpx.HTTPError as exc:
            raise PromptSourceError(source=source, reason=str(exc)) from exc
        if not response.is_success:
            raise PromptSourceError(source=source, reason=f"HTTP {response.status_code}")
        content = response.content
    else:
        logger.debug("Reading prompt file", path=source)
        try:
            content = Path(source).read_bytes()
        except OSError as exc:
            raise PromptSourceError(source=source, reason=exc.strerror or str(exc)) from exc
    return content.decode("utf-8", errors="surrogateescape")


def resolve_prompt(settings: Settings) -> str | None:
    """Pick the prompt header for a run: None in raw mode, the custom one, or the default."""
    if settings.raw:
        logger.debug("Raw mode - skipping LLM prompt")
        return None
    if settings.prompt:
        logger.debug("Using custom prompt", source=settings.prompt)
        return read_prompt_source(settings.prompt, timeout=settings.timeout)
    return DEFAULT_PROMPT


def write_output(text: str, destination: Path | None) -> None:
    """Write the artifact to `destination`, or to stdout when it is None.

    Parent directories of `destination` are created as needed. Stdout gets a trailing
    newline after the artifact.

    Raises:
        OutputWriteError: if the directory or the file cannot be written.
    """
    data = text.encode("utf-8", errors="surrogateescape")
    if destination is None:
        buffer = getattr(sys.stdout, "buffer", None)
        if buffer is None:
            sys.stdout.write(data.decode("utf-8", errors="replace") + "\n")
            return
        sys.stdout.flush()
        buffer.write(data + b"\n")
        buffer.flush()
        return

    logger.debug("Saving output", file=str(destination))
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
    except OSError as exc:
        raise OutputWriteError(path=str(destination), reason=exc.strerror or str(exc)) from exc
    logger.debug("File saved successfully", file=str(destination))
