from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from git_introspect.domain.models import CommitRecord, DiffResult, PathTree, RunResult


class CommandRunner(Protocol):
    """Executes an argument vector inside a working directory."""

    def run(self, argv: Sequence[str], cwd: str) -> RunResult: ...


class RepositoryReader(Protocol):
    """Read-only queries the application layer needs from a repository."""

    def commit_history(
        self,
        filename: str,
        limit_to_one: bool = False,
        since: int | datetime | None = None,
    ) -> list[CommitRecord]: ...

    def file_hash(self, filename: str) -> str | None: ...

    def commit_diff(
        self, filename: str, commit_a: str, commit_b: str, include_header: bool = True
    ) -> DiffResult: ...

    def list_all_files(self, flat: bool = False) -> list[str] | PathTree: ...

    def list_files_filtered(
        self,
        search: str,
        use_regex: bool = False,
        flat: bool = False,
        strict_contains: bool = False,
    ) -> list[str] | PathTree: ...
