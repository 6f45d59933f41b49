from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from git_introspect.domain.models import CommitRecord, FileReport


class Commit(BaseModel):
    commit_id: str
    timestamp: int
    committed_at: datetime
    author: str
    message: str

    @classmethod
    def from_record(cls, record: CommitRecord) -> Commit:
        return cls(
            commit_id=record.commit_id,
            timestamp=record.timestamp,
            committed_at=record.committed_at,
            author=record.author,
            message=record.message,
        )


class RepoStatus(BaseModel):
    repo_path: str
    initialized: bool
    root_directory: bool


class FileHash(BaseModel):
    file_path: str
    file_hash: str


class FileDiff(BaseModel):
    file_path: str
    commit_a: str
    commit_b: str
    include_header: bool
    diff: str


class FileContent(BaseModel):
    target: str
    commit: str | None = None
    content: str


class FileDescription(BaseModel):
    file_path: str
    file_hash: str | None
    tracked: bool
    commit_count: int
    latest_commit: Commit | None

    @classmethod
    def from_report(cls, report: FileReport) -> FileDescription:
        latest = report.latest_commit
        return cls(
            file_path=report.file_path,
            file_hash=report.file_hash,
            tracked=report.tracked,
            commit_count=report.commit_count,
            latest_commit=Commit.from_record(latest) if latest else None,
        )
