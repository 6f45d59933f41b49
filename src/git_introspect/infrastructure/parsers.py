"""Parsers for the line-oriented output of the git commands we issue.

All functions are pure: they only look at the lines they are given.
A line or listing that does not look the way git normally prints it is
reported as "nothing found", never as an exception.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from git_introspect.domain.models import NO_DIFF, CommitRecord, DiffResult

FIELD_DELIMITER = ";"
COMMIT_FORMAT = FIELD_DELIMITER.join(["%H", "%ct", "%an", "%s"])
DIFF_HEADER_LINES = 4

# Format: <mode> <type> <hash>\t<path>
_LS_TREE_LINE = re.compile(r"^\d+ \S+ ([0-9a-f]+)\t.*$")


def split_fields(line: str, count: int, delimiter: str = FIELD_DELIMITER) -> list[str] | None:
    """Split *line* into exactly *count* fields; the last keeps any extra delimiters."""
    parts = line.split(delimiter, count - 1)
    if len(parts) != count:
        return None
    return parts


def parse_commit_line(line: str) -> CommitRecord | None:
    if FIELD_DELIMITER not in line:
        return None
    fields = split_fields(line, 4)
    if fields is None:
        return None
    commit_id, timestamp, author, message = fields
    try:
        seconds = int(timestamp)
    except ValueError:
        return None
    return CommitRecord(
        commit_id=commit_id,
        timestamp=seconds,
        author=author,
        message=message,
    )


def parse_commit_lines(lines: Iterable[str]) -> list[CommitRecord]:
    """Parse ``COMMIT_FORMAT`` log output, newest first as git prints it.

    Lines without the delimiter (blank lines, warnings merged from stderr)
    are skipped. The message is everything after the third delimiter, so a
    subject containing ``;`` survives intact.
    """
    commits: list[CommitRecord] = []
    for line in lines:
        record = parse_commit_line(line)
        if record is not None:
            commits.append(record)
    return commits


def parse_file_hash(lines: Sequence[str]) -> str | None:
    """Object hash from ``git ls-tree HEAD -- <path>``; only the first line counts."""
    if not lines:
        return None
    match = _LS_TREE_LINE.match(lines[0])
    if not match:
        return None
    return match.group(1)


def parse_diff(lines: Sequence[str], filename: str, include_header: bool = True) -> DiffResult:
    """Body of ``git diff <a> <b> -- <filename>``.

    Lines 2 and 3 are the ``---``/``+++`` headers; unless both mention
    *filename* the output is not a diff of that file and ``NO_DIFF`` is
    returned. An unchanged file produces no output and is also ``NO_DIFF``.
    """
    if len(lines) < DIFF_HEADER_LINES:
        return NO_DIFF
    if filename not in lines[2] or filename not in lines[3]:
        return NO_DIFF
    body = lines if include_header else lines[DIFF_HEADER_LINES:]
    return "\n".join(body)


def is_not_a_repository(lines: Iterable[str]) -> bool:
    return any("not a git repository" in line for line in lines)


def matches_search(
    path: str,
    search: str,
    use_regex: bool = False,
    strict_contains: bool = False,
) -> bool:
    """Filter predicate used by ``GitRepository.list_files_filtered``.

    In substring mode a match at position 0 does not count (and so an empty
    *search* matches nothing). Callers relying on this keep the default;
    ``strict_contains=True`` is a plain ``in`` test.
    """
    if use_regex:
        return re.search(search.replace("/", r"\/"), path) is not None
    if strict_contains:
        return search in path
    return path.find(search) > 0
