from __future__ import annotations

import os
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, computed_field

SNIFF_BYTES: Final = 1024
"""Number of leading bytes sampled to decide whether a file is binary."""

FENCE: Final = "```"
MARKDOWN_FENCE: Final = "````"
MARKDOWN_SUFFIXES: Final = (".md", ".markdown")

EXT2LANG: dict[str, str] = {
    ".go": "go",
    ".templ": "go",
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".rs": "rust",
    ".html": "html",
    ".htm": "html",
    ".gohtml": "html",
    ".css": "css",
    ".sql": "sql",
    ".sh": "bash",
    ".pl": "perl",
    ".r": "r",
    ".m": "objectivec",  # could also be MATLAB
    ".vb": "vbnet",
    ".scala": "scala",
    ".lua": "lua",
    ".groovy": "groovy",
    ".dart": "dart",
    ".md": "markdown",
    ".markdown": "markdown",
    ".json": "json",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".tex": "tex",
    ".dockerfile": "dockerfile",
    ".df": "dockerfile",
    ".ps1": "powershell",
    ".scss": "scss",
    ".toml": "toml",
    ".zig": "zig",
    ".nim": "nim",
    ".hs": "haskell",
}

PROMPT_ENV_VAR: Final = "SOURCEPROMPT_PROMPT"

DEFAULT_PROMPT: Final = """\
You will be provided with a markdown text (under the "---" separator) containing the contents of a codebase. Each code snippet will be enclosed in code fences, along with the corresponding file name. Your task is to analyze the codebase and gain a comprehensive understanding of its structure, functionality, and key features.

Please follow these steps:

1. Read through the entire codebase carefully, paying attention to the file names and the code within each code fence.
2. Identify the main components, modules, or classes of the codebase and their responsibilities. Summarize the purpose and functionality of each significant component.
3. Analyze the relationships and dependencies between different parts of the codebase. Identify any important interactions, data flow, or control flow between the components.
4. Extract the most important features and functionalities implemented in the codebase. Highlight any critical algorithms, data structures, or design patterns used.
5. Consider the overall architecture and design of the codebase. Identify any architectural patterns or principles followed, such as MVC, MVVM, or microservices.
6. Evaluate the code quality, readability, and maintainability. Note any areas that could be improved or any potential issues or vulnerabilities.
7. Provide a summary of your analysis, including the key insights, strengths, and weaknesses of the codebase. Offer suggestions for improvements or optimizations, if applicable.
8. Based on your understanding of the codebase, provide guidance on how AI agents can effectively operate across the entire codebase. Identify the entry points, important functions, or APIs that the agents should focus on for interaction and manipulation.
9. Discuss any specific considerations or challenges that AI agents may face when working with this codebase, such as dependencies, external libraries, or platform-specific requirements.
10. Conclude your analysis by providing a high-level overview of the codebase's functionality, architecture, and potential use cases. Highlight any notable features or aspects that make this codebase unique or valuable.

Your analysis should be thorough, insightful, and aimed at enabling AI agents to effectively understand and operate within the given codebase. Provide clear explanations and examples to support your findings and recommendations.

---"""


def detect_language(path: str) -> str:
    """Get the code fence language hint for a file.

    The lookup key is the lower-cased text after the last `.` of the base name,
    so `.md` and `notes.MD` both give "markdown".

    Args:
        path (str): the file path, absolute or display-relative.

    Returns:
        str: the language name, or "" if the extension is unknown.
    """
    name = os.path.basename(path.replace("\\", "/"))
    _, dot, ext = name.rpartition(".")
    if not dot:
        return ""
    return EXT2LANG.get(f".{ext.lower()}", "")


def fence_for(path: str) -> str:
    """Pick the fence delimiter for a file.

    Markdown files may contain ``` fences of their own, so they are wrapped in a
    longer fence to keep the outer block closed at the right place.
    """
    if path.lower().endswith(MARKDOWN_SUFFIXES):
        return MARKDOWN_FENCE
    return FENCE


class FileRecord(BaseModel):
    """A text file selected for rendering.

    Attributes:
        path: Filesystem path the file was read from.
        display: Path shown in the output and matched by the filters.
        content: Raw file content.
        language: Fence language hint derived from `display` (may be empty).
        fence: Fence delimiter derived from `display`.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Filesystem path")
    display: str = Field(..., description="Path relative to the stripped prefix")
    content: bytes = Field(default=b"", description="Raw file content")

    @computed_field
    @property
    def language(self) -> str:
        """Fence language hint for the display path."""
        return detect_language(self.display)

    @computed_field
    @property
    def fence(self) -> str:
        """Fence delimiter for the display path."""
        return fence_for(self.display)

    @property
    def text(self) -> str:
        """Content decoded as UTF-8; undecodable bytes survive as surrogate escapes."""
        return self.content.decode("utf-8", errors="surrogateescape")
