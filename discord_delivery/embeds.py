from __future__ import annotations

import datetime as _dt

import discord

from models import DayReport, WeeklyReport
from reporter import DEFAULT_DISPLAY_CAP, DisplayLine, render_day_lines, status_text
from time_window import DEFAULT_OFFSET_MINUTES
from weekly import render_weekly_lines, summary_text


COLOR_SUCCESS = 0x00D084
COLOR_MISSED = 0xFF6B6B
COLOR_WEEK_MISSED = 0xFFB84D
COLOR_ERROR = 0xFF0000

GITHUB_ICON_URL = "https://github.githubassets.com/images/modules/logos_page/GitHub-Mark.png"

# Discord rejects embed fields above these sizes.
_FIELD_NAME_LIMIT = 256
_FIELD_VALUE_LIMIT = 1024


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def _repo_url(full_name: str) -> str:
    return f"https://github.com/{full_name}"


def _add_lines(embed: discord.Embed, lines: list[DisplayLine]) -> None:
    for line in lines:
        embed.add_field(
            name=_clip(line.name, _FIELD_NAME_LIMIT),
            value=_clip(line.value, _FIELD_VALUE_LIMIT),
            inline=line.inline,
        )


def day_color(report: DayReport) -> int:
    if report.fetch_error is not None:
        return COLOR_ERROR
    return COLOR_SUCCESS if report.succeeded else COLOR_MISSED


def build_daily_embed(
    report: DayReport,
    *,
    cap: int = DEFAULT_DISPLAY_CAP,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
    now: _dt.datetime | None = None,
) -> discord.Embed:
    embed = discord.Embed(
        title=f"🧮 {report.full_name} - {report.date_label} 알고리즘 문제 풀이",
        url=_repo_url(report.full_name),
        colour=day_color(report),
        description=status_text(report),
        timestamp=now or _dt.datetime.now(_dt.timezone.utc),
    )
    embed.set_footer(text=f"총 {report.solved_count}문제 해결", icon_url=GITHUB_ICON_URL)
    _add_lines(embed, render_day_lines(report, cap=cap, offset_minutes=offset_minutes))
    return embed


def build_weekly_embed(report: WeeklyReport, *, now: _dt.datetime | None = None) -> discord.Embed:
    embed = discord.Embed(
        title=f"📈 {report.full_name} - 이번주 알고리즘 문제 풀이 요약",
        url=_repo_url(report.full_name),
        colour=COLOR_SUCCESS if report.all_succeeded else COLOR_WEEK_MISSED,
        description=summary_text(report),
        timestamp=now or _dt.datetime.now(_dt.timezone.utc),
    )
    embed.set_footer(
        text=f"목표 달성: {report.days_succeeded}/{report.days_total}일",
        icon_url=GITHUB_ICON_URL,
    )
    _add_lines(embed, render_weekly_lines(report))
    return embed


def build_error_embed(message: str, *, now: _dt.datetime | None = None) -> discord.Embed:
    return discord.Embed(
        title="❌ 알고리즘 봇 오류",
        colour=COLOR_ERROR,
        description=f"```{_clip(message, 3900)}```",
        timestamp=now or _dt.datetime.now(_dt.timezone.utc),
    )
