from __future__ import annotations

from datetime import datetime

from git_introspect.domain.models import FileReport, PathTree
from git_introspect.domain.ports import RepositoryReader
from git_introspect.infrastructure.path_tree import iter_tree


def describe_file(
    repo: RepositoryReader, file_path: str, since: int | datetime | None = None
) -> FileReport:
    history = repo.commit_history(file_path, since=since)
    return FileReport(
        file_path=file_path,
        file_hash=repo.file_hash(file_path),
        latest_commit=history[0] if history else None,
        commit_count=len(history),
    )


def find_files(
    repo: RepositoryReader,
    search: str | None = None,
    use_regex: bool = False,
    flat: bool = False,
    strict_contains: bool = False,
) -> list[str] | PathTree:
    """All tracked files, or only those matching *search* when one is given."""
    if search is None:
        return repo.list_all_files(flat=flat)
    return repo.list_files_filtered(
        search, use_regex=use_regex, flat=flat, strict_contains=strict_contains
    )


def count_files(tree: PathTree) -> int:
    """Number of leaves in a tree built by ``build_tree``."""
    return sum(1 for _ in iter_tree(tree))
