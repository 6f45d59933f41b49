from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from git_introspect.domain.models import (
    CommitRecord,
    DiffResult,
    DirectoryCreateFailed,
    PathTree,
    RepositoryAlreadyExists,
    RunResult,
    ToolInitFailed,
)
from git_introspect.domain.ports import CommandRunner
from git_introspect.infrastructure.command_runner import SubprocessRunner
from git_introspect.infrastructure.parsers import (
    COMMIT_FORMAT,
    is_not_a_repository,
    matches_search,
    parse_commit_lines,
    parse_diff,
    parse_file_hash,
)
from git_introspect.infrastructure.path_tree import build_tree

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "git"
BINARY_ENV_VAR = "GIT_INTROSPECT_BINARY"
CONTROL_DIR = ".git"


def is_valid_binary(binary: str) -> bool:
    """A binary setting must split into an argv and not chain a second command."""
    if ";" in binary:
        return False
    try:
        return bool(shlex.split(binary))
    except ValueError:
        return False


def default_binary() -> str:
    return os.environ.get(BINARY_ENV_VAR, "").strip() or DEFAULT_BINARY


def _since_arg(since: int | datetime) -> str:
    if isinstance(since, datetime):
        return f"--since={since.isoformat()}"
    # git reads "@<seconds>" as a raw Unix timestamp
    return f"--since=@{since}"


def _until_arg(until: int | datetime | str) -> str:
    if isinstance(until, datetime):
        return f"--until={until.isoformat()}"
    if isinstance(until, int):
        return f"--until=@{until}"
    return f"--until={until}"


def initialize(
    directory: str,
    params: Sequence[str] | None = None,
    binary: str = DEFAULT_BINARY,
    runner: CommandRunner | None = None,
) -> RunResult:
    """Run ``git init`` in *directory*, creating it first if needed."""
    if not is_valid_binary(binary):
        raise ValueError(f"Invalid git binary: {binary!r}")
    path = Path(directory)
    if (path / CONTROL_DIR).is_dir():
        raise RepositoryAlreadyExists(directory)
    if not path.is_dir():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DirectoryCreateFailed(directory, str(exc)) from exc

    runner = runner or SubprocessRunner()
    result = runner.run([*shlex.split(binary), "init", *(params or [])], str(path))
    if not result.ok:
        raise ToolInitFailed(directory, result)
    return result


class GitRepository:
    """Typed queries against one working tree, answered by the git CLI."""

    def __init__(
        self,
        repo_path: str,
        runner: CommandRunner | None = None,
        binary: str | None = None,
    ) -> None:
        path = Path(repo_path).resolve()
        if not path.is_dir():
            raise ValueError(f"Not a directory: {path}")
        self._path = str(path)
        self._runner = runner or SubprocessRunner()
        self._binary = DEFAULT_BINARY
        requested = binary if binary is not None else default_binary()
        if not self.set_binary(requested):
            raise ValueError(f"Invalid git binary: {requested!r}")

    @classmethod
    def init(
        cls,
        directory: str,
        params: Sequence[str] | None = None,
        binary: str = DEFAULT_BINARY,
        runner: CommandRunner | None = None,
    ) -> GitRepository:
        initialize(directory, params, binary, runner)
        return cls(directory, runner=runner, binary=binary)

    @property
    def path(self) -> str:
        return self._path

    @property
    def binary(self) -> str:
        return self._binary

    def set_binary(self, binary: str) -> bool:
        """Use another git executable (or wrapper). Returns False and keeps
        the current one if *binary* is rejected."""
        if not is_valid_binary(binary):
            logger.warning("Rejected git binary %r", binary)
            return False
        self._binary = binary
        return True

    def _run(self, *args: str) -> RunResult:
        return self._runner.run([*shlex.split(self._binary), *args], self._path)

    def commit_history(
        self,
        filename: str,
        limit_to_one: bool = False,
        since: int | datetime | None = None,
    ) -> list[CommitRecord]:
        args = ["log"]
        if limit_to_one:
            args += ["-n", "1"]
        args.append(f"--format={COMMIT_FORMAT}")
        if since is not None:
            args.append(_since_arg(since))
        args += ["--", filename]
        return parse_commit_lines(self._run(*args).lines)

    def latest_commit(self, filename: str) -> CommitRecord | None:
        commits = self.commit_history(filename, limit_to_one=True)
        return commits[0] if commits else None

    def commit_at_date(
        self, date: int | datetime | str, filename: str | None = None
    ) -> CommitRecord | None:
        """Newest commit at or before *date*, for one file or the whole tree."""
        args = ["log", "-1", f"--format={COMMIT_FORMAT}", _until_arg(date)]
        if filename:
            args += ["--", filename]
        commits = parse_commit_lines(self._run(*args).lines)
        return commits[0] if commits else None

    def file_hash(self, filename: str) -> str | None:
        return parse_file_hash(self._run("ls-tree", "HEAD", "--", filename).lines)

    def commit_diff(
        self, filename: str, commit_a: str, commit_b: str, include_header: bool = True
    ) -> DiffResult:
        result = self._run("diff", commit_a, commit_b, "--", filename)
        return parse_diff(result.lines, filename, include_header)

    def file_at_commit(self, filename: str, commit: str) -> str | None:
        result = self._run("show", f"{commit}:{filename}")
        return result.output if result.ok else None

    def file_from_hash(self, object_hash: str) -> str | None:
        result = self._run("show", object_hash)
        return result.output if result.ok else None

    def list_all_files(self, flat: bool = False) -> list[str] | PathTree:
        result = self._run("ls-files")
        files = result.lines if result.ok else []
        return files if flat else build_tree(files)

    def list_files_filtered(
        self,
        search: str,
        use_regex: bool = False,
        flat: bool = False,
        strict_contains: bool = False,
    ) -> list[str] | PathTree:
        files = [
            f for f in self.list_all_files(flat=True)
            if matches_search(f, search, use_regex, strict_contains)
        ]
        return files if flat else build_tree(files)

    def is_initialized(self) -> bool:
        return not is_not_a_repository(self._run("status").lines)

    def is_root_directory(self) -> bool:
        return (Path(self._path) / CONTROL_DIR).is_dir()
