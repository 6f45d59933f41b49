import os
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository."""
    repo = tmp_path / "repo"
    subprocess.run(
        ["git", "init", str(repo)],
        capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "-C", str(repo), "config", "user.name", "Test User"],
        capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "-C", str(repo), "config", "user.email", "test@example.com"],
        capture_output=True, check=True,
    )
    return repo


def commit_file(
    repo: Path,
    file_path: str,
    content: str,
    message: str,
    days_ago: int = 0,
    author_name: str = "Test User",
    author_email: str = "test@example.com",
) -> str:
    """Create a commit at a known relative date and return its hash."""
    full_path = repo / file_path
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_text(content)

    date = datetime.now(timezone.utc) - timedelta(days=days_ago)
    date_str = date.strftime("%Y-%m-%dT%H:%M:%S %z")

    subprocess.run(
        ["git", "-C", str(repo), "add", file_path],
        capture_output=True, check=True,
    )
    env = {
        **os.environ,
        "GIT_AUTHOR_DATE": date_str,
        "GIT_COMMITTER_DATE": date_str,
        "GIT_AUTHOR_NAME": author_name,
        "GIT_AUTHOR_EMAIL": author_email,
        "GIT_COMMITTER_NAME": author_name,
        "GIT_COMMITTER_EMAIL": author_email,
    }
    subprocess.run(
        ["git", "-C", str(repo), "commit", "-m", message],
        capture_output=True, check=True,
        env=env,
    )
    result = subprocess.run(
        ["git", "-C", str(repo), "rev-parse", "HEAD"],
        capture_output=True, check=True, text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo_with_history(tmp_git_repo: Path) -> Path:
    """Create a repo with 5 commits across 3 files over 60 days."""
    commit_file(tmp_git_repo, "README.md", "# Project\n", "Initial commit", days_ago=60)
    commit_file(tmp_git_repo, "src/main.py", "print('hello')\n", "Add main", days_ago=45)
    commit_file(
        tmp_git_repo, "src/utils.py", "def helper(): pass\n", "Add utils",
        days_ago=30, author_name="Alice", author_email="alice@example.com",
    )
    commit_file(tmp_git_repo, "src/main.py", "print('hello world')\n", "Update main", days_ago=15)
    commit_file(
        tmp_git_repo, "README.md", "# Project\nUpdated.\n", "Update README; bump docs",
        days_ago=5,
    )
    return tmp_git_repo
