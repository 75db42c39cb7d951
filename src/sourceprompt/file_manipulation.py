from __future__ import annotations

import codecs
import os
import re
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from sourceprompt.config import SNIFF_BYTES, FileRecord
from sourceprompt.exceptions import PatternCompileError, TraversalIOError
from sourceprompt.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence


def _io_error(path: str | Path, exc: OSError) -> TraversalIOError:
    return TraversalIOError(path=str(path), reason=exc.strerror or str(exc))


def strip_prefix(path: str, prefix: str) -> str:
    """Turn a visited filesystem path into its display path.

    The prefix is removed, then any leading `/` or `\\`. A path that does not start
    with `prefix` is returned unchanged. A prefix of `.` strips nothing, otherwise
    hidden entries such as `.git` would lose their leading dot.

    Args:
        path (str): the path produced by the walk
        prefix (str): the traversal root or clone directory to remove

    Returns:
        str: the display path
    """
    if not prefix or prefix == os.curdir or not path.startswith(prefix):
        return path
    return path[len(prefix) :].lstrip("/\\")


def is_binary(path: str | Path) -> bool:
    """Check if a file looks binary by sniffing its first bytes.

    At most `SNIFF_BYTES` bytes are read; a shorter file is sampled whole. The file is
    binary when the sample is not valid UTF-8. A full-size sample may end in the middle
    of a multi-byte character, which is not held against it.

    Args:
        path (str | Path): the file to sniff

    Raises:
        TraversalIOError: if the file cannot be opened or read.

    Returns:
        bool: True if the file is binary, False if it is text
    """
    try:
        with Path(path).open("rb") as f:
            sample = f.read(SNIFF_BYTES)
    except OSError as exc:
        raise _io_error(path, exc) from exc

    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(sample, final=len(sample) < SNIFF_BYTES)
    except UnicodeDecodeError:
        return True
    return False


def read_content(path: str | Path) -> bytes:
    """Read a whole file, wrapping I/O failures into `TraversalIOError`."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise _io_error(path, exc) from exc


def compile_patterns(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    """Compile include/exclude expressions, skipping blank entries.

    Args:
        patterns (Iterable[str]): raw regular expressions from the command line

    Raises:
        PatternCompileError: on the first malformed expression.

    Returns:
        list[re.Pattern[str]]: the compiled patterns, in input order
    """
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        if not pattern:
            continue
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise PatternCompileError(pattern=pattern, reason=str(exc)) from exc
    return compiled


def matches_filters(
    display: str,
    includes: Sequence[re.Pattern[str]],
    excludes: Sequence[re.Pattern[str]],
) -> bool:
    """Decide whether a display path is eligible for rendering.

    - With no includes everything is included, otherwise one include must match.
    - Any matching exclude rejects the path, even if an include matched too.

    Patterns are searched anywhere in the path, not anchored.
    """
    if includes and not any(p.search(display) for p in includes):
        return False
    return not any(p.search(display) for p in excludes)


def _join(directory: str, name: str) -> str:
    if directory == os.curdir:
        return name
    return os.path.join(directory, name)


def _walk_dir(directory: str) -> Iterator[tuple[str, bool]]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise _io_error(directory, exc) from exc

    for entry in entries:
        path = _join(directory, entry.name)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            raise _io_error(path, exc) from exc
        yield path, is_dir
        if is_dir:
            yield from _walk_dir(path)


def walk_tree(root: str) -> Iterator[tuple[str, bool]]:
    """Walk `root` depth-first in lexical order.

    The root itself comes first, then the entries of each directory sorted by name,
    descending into a subdirectory as soon as it is met. Symlinked directories below
    the root are listed but not entered.

    Args:
        root (str): the directory (or single file) to walk

    Raises:
        TraversalIOError: if the root or any directory cannot be listed.

    Yields:
        Iterator[tuple[str, bool]]: `(path, is_dir)` for every entry
    """
    try:
        is_dir = stat.S_ISDIR(os.stat(root).st_mode)
    except OSError as exc:
        raise _io_error(root, exc) from exc
    yield root, is_dir
    if is_dir:
        yield from _walk_dir(root)


def iter_file_records(
    root: str | Path,
    prefix_to_strip: str | Path,
    includes: Sequence[re.Pattern[str]] = (),
    excludes: Sequence[re.Pattern[str]] = (),
) -> Iterator[FileRecord]:
    """Yield a `FileRecord` for every text file under `root` that passes the filters.

    Directories, hidden display paths (first character `.`), filtered and binary
    files are skipped. Any I/O error stops the walk.

    Args:
        root (str | Path): the traversal root
        prefix_to_strip (str | Path): removed from each visited path to build its display path
        includes (Sequence[re.Pattern[str]]): include patterns, matched against display paths
        excludes (Sequence[re.Pattern[str]]): exclude patterns, matched against display paths

    Raises:
        TraversalIOError: if a directory cannot be listed or a file cannot be read.

    Yields:
        Iterator[FileRecord]: the records, in walk order
    """
    root_s = os.path.normpath(str(root))
    prefix = os.path.normpath(str(prefix_to_strip)) if str(prefix_to_strip) else ""

    for path, is_dir in walk_tree(root_s):
        logger.debug("Processing", path=path)
        display = strip_prefix(path, prefix) or os.path.basename(path)

        if is_dir or display.startswith("."):
            logger.debug("Skipped: path is dir or starts with dot", path=path, display=display)
            continue

        if includes and not matches_filters(display, includes, ()):
            logger.debug("Skipped: doesn't match any include pattern", path=path, display=display)
            continue

        if not matches_filters(display, (), excludes):
            logger.debug("Skipped: matches exclude pattern", path=path, display=display)
            continue

        if is_binary(path):
            logger.debug("Skipped: binary file", path=path, display=display)
            continue

        yield FileRecord(path=path, display=display, content=read_content(path))
