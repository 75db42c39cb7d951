from dataclasses import dataclass


@dataclass(eq=False)
class SourcePromptError(Exception):
    """Base exception for errors in the sourceprompt package."""


@dataclass(eq=False)
class TraversalIOError(SourcePromptError):
    """Raised when a file or directory cannot be opened, listed or read during the walk."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass(eq=False)
class PatternCompileError(SourcePromptError):
    """Raised when an include or exclude expression is not a valid regular expression."""

    pattern: str
    reason: str

    def __str__(self) -> str:
        return f"invalid pattern {self.pattern!r}: {self.reason}"


@dataclass(eq=False)
class PromptSourceError(SourcePromptError):
    """Raised when a custom prompt file cannot be read or a prompt URL cannot be fetched."""

    source: str
    reason: str

    def __str__(self) -> str:
        return f"cannot load prompt from {self.source}: {self.reason}"


@dataclass(eq=False)
class OutputWriteError(SourcePromptError):
    """Raised when the output file or its parent directory cannot be written."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"cannot write {self.path}: {self.reason}"


@dataclass(eq=False)
class GitCommandError(SourcePromptError):
    """Raised when a git command fails."""

    command: str
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        detail = self.stderr.strip() or self.stdout.strip()
        return f"`{self.command}` exited with {self.returncode}: {detail}"


@dataclass(eq=False)
class InvalidSourceError(SourcePromptError):
    """Raised when the argument is neither a reachable URL nor an existing path."""

    source: str
    message: str = "argument must be a valid git URL or file path"

    def __str__(self) -> str:
        return f"{self.message}: {self.source}"
