from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass

from models import CommitRecord, DayReport
from time_window import DEFAULT_OFFSET_MINUTES, to_local


DEFAULT_DISPLAY_CAP = 10


@dataclass(frozen=True)
class DisplayLine:
    name: str
    value: str
    inline: bool = False


def format_date_label(day: _dt.date) -> str:
    return f"{day.year}. {day.month}. {day.day}."


def format_local_time(instant: _dt.datetime, offset_minutes: int = DEFAULT_OFFSET_MINUTES) -> str:
    return to_local(instant, offset_minutes).strftime("%H:%M")


def build_day_report(
    owner: str,
    repo: str,
    date_label: str,
    commits: list[CommitRecord],
    fetch_error: str | None,
    target_count: int,
    local_date: _dt.date | None = None,
) -> DayReport:
    return DayReport(
        owner=owner,
        repo=repo,
        date_label=date_label,
        local_date=local_date,
        commits=[] if fetch_error is not None else list(commits),
        target_count=target_count,
        fetch_error=fetch_error,
    )


def render_display_lines(
    commits: list[CommitRecord],
    cap: int = DEFAULT_DISPLAY_CAP,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
) -> list[DisplayLine]:
    lines: list[DisplayLine] = []
    for commit in commits[:cap]:
        lines.append(
            DisplayLine(
                name=format_local_time(commit.author_date, offset_minutes),
                value=f"[`{commit.short_sha}`]({commit.url}) {commit.message_first_line}",
            )
        )

    remaining = len(commits) - cap
    if remaining > 0:
        lines.append(
            DisplayLine(
                name="📋 더 많은 문제",
                value=f"{remaining}개의 추가 문제를 더 풀었습니다.",
            )
        )
    return lines


def render_day_lines(
    report: DayReport,
    cap: int = DEFAULT_DISPLAY_CAP,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
) -> list[DisplayLine]:
    if report.fetch_error is not None:
        return [
            DisplayLine(
                name="⚠️ 커밋 조회 실패",
                value=f"레포지토리 정보를 가져오는데 실패했습니다.\n오류: {report.fetch_error}",
            )
        ]

    if not report.commits:
        return [
            DisplayLine(
                name="😴 문제 풀이 없음",
                value=f"{report.date_label}에는 알고리즘 문제를 풀지 않았습니다.",
            )
        ]

    return render_display_lines(report.commits, cap=cap, offset_minutes=offset_minutes)


def status_text(report: DayReport) -> str:
    if report.fetch_error is not None:
        return f"❌ **?/{report.target_count}**"
    emoji = "✅" if report.succeeded else "❌"
    return f"{emoji} **{report.solved_count}/{report.target_count}**"
