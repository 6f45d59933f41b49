import argparse
import logging
import os
import re
import sys
from datetime import datetime

from git_introspect.application.use_cases import count_files, describe_file, find_files
from git_introspect.domain.models import LEAF_KEY, NO_DIFF, GitIntrospectError
from git_introspect.infrastructure.git_repository import (
    GitRepository,
    default_binary,
    initialize,
    is_valid_binary,
)

REPO_ENV_VAR = "GIT_INTROSPECT_REPO"


def _parse_since(value: str) -> int | datetime:
    """Parse a Unix timestamp ('1700000000') or an ISO 8601 date."""
    if value.isdigit():
        return int(value)
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Use Unix seconds or ISO 8601, e.g. 2024-06-01"
        )


def _error_exit(msg: str) -> None:
    """Print error message to stderr and exit with code 1."""
    print(f"Error: {msg}", file=sys.stderr)
    sys.exit(1)


def _format_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp).astimezone().strftime("%Y-%m-%d %H:%M:%S %z")


def _print_commits(commits) -> None:
    if not commits:
        print("No commits found.")
        return
    author_width = min(max(len(c.author) for c in commits), 24)
    for c in commits:
        print(f"{c.commit_id[:10]}  {_format_date(c.timestamp)}  {c.author:<{author_width}}  {c.message}")


def _print_tree(tree, indent: int = 0) -> None:
    pad = "  " * indent
    for key, child in tree.items():
        if key == LEAF_KEY:
            continue
        print(f"{pad}{key}/")
        _print_tree(child, indent + 1)
    for name in tree.get(LEAF_KEY, []):
        print(f"{pad}{name}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-introspect",
        description="Typed queries against a git working tree",
    )
    parser.add_argument(
        "--repo",
        dest="repo_path",
        default=None,
        metavar="PATH",
        help=f"Path to the repository (default: ${REPO_ENV_VAR} or the current directory)",
    )
    parser.add_argument(
        "--git-binary",
        dest="git_binary",
        default=None,
        metavar="BIN",
        help="git executable or wrapper to invoke (default: $GIT_INTROSPECT_BINARY or git)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every git invocation",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    files = sub.add_parser("files", help="List tracked files")
    files.add_argument("--flat", action="store_true", help="One path per line instead of a tree")
    files.add_argument("--search", default=None, help="Only keep paths matching this text")
    files.add_argument("--regex", action="store_true", help="Treat --search as a regular expression")
    files.add_argument(
        "--strict",
        dest="strict_contains",
        action="store_true",
        help="Substring search also matches at the start of a path",
    )

    log = sub.add_parser("log", help="Commit history of a file")
    log.add_argument("file")
    log.add_argument("--last", action="store_true", help="Only the most recent commit")
    log.add_argument("--since", type=_parse_since, default=None, metavar="DATE")

    hash_cmd = sub.add_parser("hash", help="Object hash of a file at HEAD")
    hash_cmd.add_argument("file")

    diff = sub.add_parser("diff", help="Diff of a file between two commits")
    diff.add_argument("file")
    diff.add_argument("commit_a")
    diff.add_argument("commit_b")
    diff.add_argument("--no-header", dest="include_header", action="store_false")

    show = sub.add_parser("show", help="Content of a file at a commit, or of an object hash")
    show.add_argument("target", help="File path, or object hash with --object")
    show.add_argument("--at", dest="commit", default="HEAD", metavar="REF")
    show.add_argument("--object", action="store_true", help="TARGET is an object hash")

    at_date = sub.add_parser("at-date", help="Newest commit at or before a date")
    at_date.add_argument("date", type=_parse_since)
    at_date.add_argument("file", nargs="?", default=None)

    describe = sub.add_parser("describe", help="Hash, latest commit and commit count of a file")
    describe.add_argument("file")

    sub.add_parser("status", help="Is this an initialized repository root?")

    init = sub.add_parser("init", help="Create a repository")
    init.add_argument("directory")
    init.add_argument("params", nargs=argparse.REMAINDER, help="Extra arguments for git init")

    serve = sub.add_parser("serve", help="Serve the read-only JSON API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000, metavar="PORT")
    return parser


def _run_command(args, repo: GitRepository) -> None:
    if args.command == "files":
        try:
            result = find_files(
                repo, args.search, use_regex=args.regex,
                flat=args.flat, strict_contains=args.strict_contains,
            )
        except re.error as e:
            _error_exit(f"invalid pattern {args.search!r}: {e}")
        if args.flat:
            for path in result:
                print(path)
        else:
            _print_tree(result)
            print(f"\n{count_files(result)} files")

    elif args.command == "log":
        _print_commits(repo.commit_history(args.file, limit_to_one=args.last, since=args.since))

    elif args.command == "hash":
        file_hash = repo.file_hash(args.file)
        if file_hash is None:
            _error_exit(f"{args.file} not found at HEAD")
        print(file_hash)

    elif args.command == "diff":
        body = repo.commit_diff(args.file, args.commit_a, args.commit_b, args.include_header)
        if body is NO_DIFF:
            print("No diff available.")
            return
        print(body)

    elif args.command == "show":
        if args.object:
            content = repo.file_from_hash(args.target)
        else:
            content = repo.file_at_commit(args.target, args.commit)
        if content is None:
            _error_exit(f"cannot show {args.target}")
        print(content)

    elif args.command == "at-date":
        commit = repo.commit_at_date(args.date, args.file)
        _print_commits([commit] if commit else [])

    elif args.command == "describe":
        report = describe_file(repo, args.file)
        print(f"File:        {report.file_path}")
        print(f"Hash:        {report.file_hash or '(not tracked at HEAD)'}")
        print(f"Commits:     {report.commit_count}")
        if report.latest_commit:
            c = report.latest_commit
            print(f"Last commit: {c.commit_id} ({_format_date(c.timestamp)}, {c.author})")
            print(f"             {c.message}")

    elif args.command == "status":
        print(f"Repository:  {repo.path}")
        print(f"Initialized: {'yes' if repo.is_initialized() else 'no'}")
        print(f"Root:        {'yes' if repo.is_root_directory() else 'no'}")


def main() -> None:
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    binary = args.git_binary if args.git_binary is not None else default_binary()
    if not is_valid_binary(binary):
        _error_exit(f"invalid git binary {binary!r}")

    if args.command == "init":
        params = [p for p in args.params if p != "--"]
        try:
            result = initialize(args.directory, params, binary=binary)
        except GitIntrospectError as e:
            _error_exit(str(e))
        print(result.output)
        return

    repo_path = args.repo_path or os.environ.get(REPO_ENV_VAR) or os.getcwd()

    if args.command == "serve":
        try:
            import fastapi  # noqa: F401
            import uvicorn  # noqa: F401

            from git_introspect.web.server import launch
        except ImportError:
            _error_exit(
                "web dependencies not installed. "
                "Run: pip install git-introspect[web]"
            )
        launch(repo_path=repo_path, binary=binary, host=args.host, port=args.port)
        return

    try:
        repo = GitRepository(repo_path, binary=binary)
    except ValueError as e:
        _error_exit(str(e))

    try:
        _run_command(args, repo)
    except GitIntrospectError as e:
        _error_exit(str(e))
