from __future__ import annotations

import datetime as _dt
from typing import Any

from pydantic import BaseModel, ConfigDict, computed_field, model_validator


class TimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    since_utc: _dt.datetime
    until_utc: _dt.datetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.since_utc >= self.until_utc:
            raise ValueError("since_utc must be earlier than until_utc")
        return self

    @property
    def duration(self) -> _dt.timedelta:
        return self.until_utc - self.since_utc


class CommitRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    sha: str
    message: str
    author_date: _dt.datetime
    url: str

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def message_first_line(self) -> str:
        lines = self.message.splitlines()
        return lines[0].strip() if lines else ""

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "CommitRecord":
        if not isinstance(payload, dict):
            raise TypeError(f"commit entry must be an object, got {type(payload).__name__}")
        commit = payload.get("commit") or {}
        if not isinstance(commit, dict):
            raise TypeError("commit must be an object")
        author = commit.get("author") or {}
        if not isinstance(author, dict):
            raise TypeError("commit.author must be an object")
        return cls(
            sha=str(payload["sha"]),
            message=str(commit.get("message") or ""),
            author_date=author["date"],
            url=str(payload.get("html_url") or ""),
        )


class DayReport(BaseModel):
    owner: str
    repo: str
    date_label: str
    local_date: _dt.date | None = None
    commits: list[CommitRecord] = []
    target_count: int
    fetch_error: str | None = None

    @model_validator(mode="after")
    def _drop_commits_on_error(self) -> "DayReport":
        # A failed fetch never reports stale commit data.
        if self.fetch_error is not None and self.commits:
            self.commits = []
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def solved_count(self) -> int:
        return len(self.commits)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def succeeded(self) -> bool:
        if self.fetch_error is not None:
            return False
        return len(self.commits) >= self.target_count

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class WeeklyReport(BaseModel):
    owner: str
    repo: str
    per_day: list[DayReport]

    @model_validator(mode="after")
    def _check_length(self) -> "WeeklyReport":
        if len(self.per_day) > 5:
            raise ValueError(f"weekly report holds at most 5 days, got {len(self.per_day)}")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_commits(self) -> int:
        return sum(len(day.commits) for day in self.per_day)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def days_succeeded(self) -> int:
        return sum(1 for day in self.per_day if day.succeeded)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def days_total(self) -> int:
        return len(self.per_day)

    @property
    def all_succeeded(self) -> bool:
        # An empty week is not a success; it renders with the missed colour.
        return self.days_total > 0 and self.days_succeeded == self.days_total

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
