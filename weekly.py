from __future__ import annotations

from models import DayReport, WeeklyReport
from reporter import DisplayLine


_DAY_NAMES = ["월", "화", "수", "목", "금", "토", "일"]


def build_weekly_report(owner: str, repo: str, per_day_reports: list[DayReport]) -> WeeklyReport:
    if len(per_day_reports) > 5:
        raise ValueError(f"expected at most 5 daily reports, got {len(per_day_reports)}")
    return WeeklyReport(owner=owner, repo=repo, per_day=list(per_day_reports))


def _day_name(report: DayReport, index: int) -> str:
    if report.local_date is not None:
        return _DAY_NAMES[report.local_date.weekday()]
    return _DAY_NAMES[index]


def render_weekly_lines(report: WeeklyReport) -> list[DisplayLine]:
    lines: list[DisplayLine] = []
    for index, day in enumerate(report.per_day):
        emoji = "✅" if day.succeeded else "❌"
        lines.append(
            DisplayLine(
                name=f"{emoji} {_day_name(day, index)}요일",
                value=f"{day.solved_count}/{day.target_count}",
                inline=True,
            )
        )
    return lines


def summary_text(report: WeeklyReport) -> str:
    return f"이번주 **총 {report.total_commits}문제**를 해결했습니다! 🎉"
