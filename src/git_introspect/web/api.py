from __future__ import annotations

import re
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query

from git_introspect.application.use_cases import describe_file, find_files
from git_introspect.domain.models import NO_DIFF
from git_introspect.infrastructure.git_repository import GitRepository
from git_introspect.web.models import (
    Commit,
    FileContent,
    FileDescription,
    FileDiff,
    FileHash,
    RepoStatus,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo_path = getattr(app.state, "repo_path", None) or "."
    binary = getattr(app.state, "binary", None)
    app.state.repo = GitRepository(repo_path, binary=binary)
    yield


app = FastAPI(title="git-introspect", lifespan=lifespan)


def _repo() -> GitRepository:
    return app.state.repo


def _files(search: str | None, regex: bool, flat: bool, strict: bool):
    try:
        return find_files(_repo(), search, use_regex=regex, flat=flat, strict_contains=strict)
    except re.error as e:
        raise HTTPException(status_code=400, detail=f"Invalid pattern: {e}")


@app.get("/api/status", response_model=RepoStatus)
def status():
    repo = _repo()
    return RepoStatus(
        repo_path=repo.path,
        initialized=repo.is_initialized(),
        root_directory=repo.is_root_directory(),
    )


@app.get("/api/files", response_model=list[str])
def list_files(
    search: str | None = Query(None, description="Text or pattern paths must match"),
    regex: bool = False,
    strict: bool = Query(False, description="Substring search also matches at position 0"),
):
    return _files(search, regex, flat=True, strict=strict)


@app.get("/api/files/tree", response_model=dict[str, Any])
def file_tree(
    search: str | None = Query(None, description="Text or pattern paths must match"),
    regex: bool = False,
    strict: bool = False,
):
    return _files(search, regex, flat=False, strict=strict)


@app.get("/api/log", response_model=list[Commit])
def commit_log(
    path: str = Query(..., description="Repository-relative file path"),
    last: bool = False,
    since: int | None = Query(None, description="Unix timestamp"),
):
    commits = _repo().commit_history(path, limit_to_one=last, since=since)
    return [Commit.from_record(c) for c in commits]


@app.get("/api/hash", response_model=FileHash)
def file_hash(path: str = Query(..., description="Repository-relative file path")):
    value = _repo().file_hash(path)
    if value is None:
        raise HTTPException(status_code=404, detail=f"{path} not found at HEAD")
    return FileHash(file_path=path, file_hash=value)


@app.get("/api/diff", response_model=FileDiff)
def file_diff(
    path: str = Query(..., description="Repository-relative file path"),
    a: str = Query(..., description="First commit"),
    b: str = Query(..., description="Second commit"),
    header: bool = True,
):
    body = _repo().commit_diff(path, a, b, include_header=header)
    if body is NO_DIFF:
        raise HTTPException(status_code=404, detail="No diff available")
    return FileDiff(file_path=path, commit_a=a, commit_b=b, include_header=header, diff=body)


@app.get("/api/show", response_model=FileContent)
def show(
    path: str | None = Query(None, description="Repository-relative file path"),
    commit: str = "HEAD",
    object_hash: str | None = Query(None, alias="hash", description="Object hash"),
):
    if object_hash is not None:
        content = _repo().file_from_hash(object_hash)
        target, ref = object_hash, None
    elif path is not None:
        content = _repo().file_at_commit(path, commit)
        target, ref = path, commit
    else:
        raise HTTPException(status_code=400, detail="Either path or hash is required")
    if content is None:
        raise HTTPException(status_code=404, detail=f"Cannot show {target}")
    return FileContent(target=target, commit=ref, content=content)


@app.get("/api/describe", response_model=FileDescription)
def describe(path: str = Query(..., description="Repository-relative file path")):
    return FileDescription.from_report(describe_file(_repo(), path))
