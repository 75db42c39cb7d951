from __future__ import annotations

import io
from typing import TYPE_CHECKING

from sourceprompt.file_manipulation import iter_file_records
from sourceprompt.logging import logger

if TYPE_CHECKING:
    import re
    from collections.abc import Sequence
    from pathlib import Path

    from sourceprompt.config import FileRecord


def write_block(out: io.StringIO, rec: FileRecord) -> None:
    """Append one rendered file to `out`.

    The block is the backquoted display path, a blank line, the opening fence with its
    language hint, the content (forced to end with a newline), the closing fence and a
    blank separator line.
    """
    body = rec.text
    out.write(f"`{rec.display}`\n\n")
    out.write(f"{rec.fence}{rec.language}\n")
    out.write(body)
    if not body.endswith("\n"):
        out.write("\n")
    out.write(f"{rec.fence}\n\n")


def render_tree(
    root: str | Path,
    prefix_to_strip: str | Path,
    includes: Sequence[re.Pattern[str]] = (),
    excludes: Sequence[re.Pattern[str]] = (),
) -> str:
    """Render every eligible text file under `root` as fenced markdown blocks.

    Args:
        root (str | Path): the directory to render
        prefix_to_strip (str | Path): removed from each path before display and filtering
        includes (Sequence[re.Pattern[str]]): a file must match one of these, when given
        excludes (Sequence[re.Pattern[str]]): a file matching any of these is dropped

    Raises:
        TraversalIOError: if any directory or file cannot be read; nothing is returned.

    Returns:
        str: the concatenated blocks, in walk order
    """
    out = io.StringIO()
    count = 0
    for rec in iter_file_records(root, prefix_to_strip, includes, excludes):
        write_block(out, rec)
        count += 1
    logger.debug("Processing done", root=str(root), files=count)
    return out.getvalue()


def assemble_output(body: str, header: str | None) -> str:
    """Prepend the prompt header to the rendered body.

    Args:
        body (str): the output of `render_tree`
        header (str | None): the prompt text, or None for raw output

    Returns:
        str: the final artifact
    """
    if header is None:
        return body
    return f"{header}\n\n{body}"
