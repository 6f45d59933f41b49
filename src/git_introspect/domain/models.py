from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Union

# Directory segment -> nested tree, or "." -> file names at that level.
PathTree = dict[str, Union["PathTree", list[str]]]

LEAF_KEY = "."


@dataclass(frozen=True)
class CommitRecord:
    """One commit as reported by a ``%H;%ct;%an;%s`` log line."""

    commit_id: str
    timestamp: int  # committer date, Unix seconds
    author: str
    message: str

    @property
    def committed_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


@dataclass(frozen=True)
class RunResult:
    """Captured output of one git invocation (stdout and stderr merged)."""

    lines: list[str] = field(default_factory=list)
    exit_code: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


class NoDiff:
    """Sentinel for a diff whose header does not reference the file."""

    _instance: NoDiff | None = None

    def __new__(cls) -> NoDiff:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_DIFF"


NO_DIFF = NoDiff()

DiffResult = Union[str, NoDiff]


@dataclass(frozen=True)
class FileReport:
    """What the repository knows about a single tracked path."""

    file_path: str
    file_hash: str | None
    latest_commit: CommitRecord | None
    commit_count: int

    @property
    def tracked(self) -> bool:
        return self.file_hash is not None


class GitIntrospectError(Exception):
    """Base class for failures surfaced by this package."""


class GitExecutionError(GitIntrospectError):
    """The git binary could not be executed at all."""


class InitializationError(GitIntrospectError):
    """``git init`` could not produce a repository."""

    def __init__(self, directory: str, message: str) -> None:
        super().__init__(message)
        self.directory = directory


class RepositoryAlreadyExists(InitializationError):
    def __init__(self, directory: str) -> None:
        super().__init__(directory, f"Repository already exists in {directory}")


class DirectoryCreateFailed(InitializationError):
    def __init__(self, directory: str, reason: str = "") -> None:
        message = f"Unable to create directory '{directory}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(directory, message)


class ToolInitFailed(InitializationError):
    def __init__(self, directory: str, result: RunResult) -> None:
        super().__init__(
            directory,
            f"git init failed (directory {directory}, exit code {result.exit_code})",
        )
        self.result = result
