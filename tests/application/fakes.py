from collections.abc import Sequence
from datetime import datetime

from git_introspect.domain.models import NO_DIFF, CommitRecord, DiffResult, PathTree, RunResult
from git_introspect.infrastructure.parsers import matches_search
from git_introspect.infrastructure.path_tree import build_tree


class FakeRunner:
    """Plain stub implementing the CommandRunner protocol.

    Returns canned results keyed by the git subcommand and records every call.
    """

    def __init__(self, results: dict[str, RunResult] | None = None) -> None:
        self._results = results or {}
        self.calls: list[tuple[list[str], str]] = []

    def run(self, argv: Sequence[str], cwd: str) -> RunResult:
        self.calls.append((list(argv), cwd))
        return self._results.get(argv[1] if len(argv) > 1 else "", RunResult())

    @property
    def last_argv(self) -> list[str]:
        return self.calls[-1][0]


class FakeRepositoryReader:
    """Plain stub implementing the RepositoryReader protocol."""

    def __init__(
        self,
        commits: dict[str, list[CommitRecord]] | None = None,
        hashes: dict[str, str] | None = None,
        files: list[str] | None = None,
    ) -> None:
        self._commits = commits or {}
        self._hashes = hashes or {}
        self._files = files or []

    def commit_history(
        self,
        filename: str,
        limit_to_one: bool = False,
        since: int | datetime | None = None,
    ) -> list[CommitRecord]:
        commits = self._commits.get(filename, [])
        if isinstance(since, int):
            commits = [c for c in commits if c.timestamp >= since]
        return commits[:1] if limit_to_one else commits

    def file_hash(self, filename: str) -> str | None:
        return self._hashes.get(filename)

    def commit_diff(
        self, filename: str, commit_a: str, commit_b: str, include_header: bool = True
    ) -> DiffResult:
        return NO_DIFF

    def list_all_files(self, flat: bool = False) -> list[str] | PathTree:
        return list(self._files) if flat else build_tree(self._files)

    def list_files_filtered(
        self,
        search: str,
        use_regex: bool = False,
        flat: bool = False,
        strict_contains: bool = False,
    ) -> list[str] | PathTree:
        files = [f for f in self._files if matches_search(f, search, use_regex, strict_contains)]
        return files if flat else build_tree(files)
