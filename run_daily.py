from __future__ import annotations

import datetime as _dt
import enum
import time
from dataclasses import dataclass, field
from typing import Callable

import discord

from commit_collector import collect_day
from config import BotConfig
from discord_delivery.discord_client import DiscordResult
from discord_delivery.embeds import build_daily_embed, build_weekly_embed
from discord_delivery.send_report import WebhookSender
from logger import get_logger
from models import DayReport, WeeklyReport
from time_window import is_weekend, local_now, monday_of_week, weekdays_up_to, yesterday
from weekly import build_weekly_report


_LOG = get_logger()

_WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

Sender = Callable[[discord.Embed], DiscordResult]


class Action(enum.Enum):
    SKIP = "skip"
    DAILY = "daily"
    SATURDAY = "saturday"


@dataclass
class RunSummary:
    action: Action
    local_date: _dt.date
    daily_reports: list[DayReport] = field(default_factory=list)
    weekly_reports: list[WeeklyReport] = field(default_factory=list)
    sent: int = 0
    send_failures: int = 0


def decide_action(local_date: _dt.date) -> Action:
    weekday = local_date.weekday()
    if weekday == 6:
        return Action.SKIP
    if weekday == 5:
        return Action.SATURDAY
    return Action.DAILY


def _pause(sleep: Callable[[float], None], delay_ms: int) -> None:
    if delay_ms > 0:
        sleep(delay_ms / 1000)


def _send(
    summary: RunSummary,
    sender: Sender,
    embed: discord.Embed,
    *,
    config: BotConfig,
    sleep: Callable[[float], None],
) -> None:
    try:
        res = sender(embed)
    except Exception as e:
        _LOG.exception("Send raised for %s: %s", embed.title, e)
        res = DiscordResult(ok=False, status_code=None, latency_ms=None, error=str(e))

    if res.ok:
        summary.sent += 1
    else:
        summary.send_failures += 1
        _LOG.error(
            "Send failed for %s (http=%s error=%s), continuing",
            embed.title,
            res.status_code,
            res.error,
        )
    _pause(sleep, config.send_delay_ms)


def _collect_days(
    config: BotConfig,
    day: _dt.date,
    *,
    sleep: Callable[[float], None],
) -> list[DayReport]:
    reports: list[DayReport] = []
    for repo in config.repositories:
        reports.append(collect_day(repo.owner, repo.name, day, config))
        _pause(sleep, config.fetch_delay_ms)
    return reports


def _collect_week(
    config: BotConfig,
    owner: str,
    repo: str,
    today: _dt.date,
    *,
    sleep: Callable[[float], None],
) -> WeeklyReport:
    per_day: list[DayReport] = []
    for day in weekdays_up_to(monday_of_week(today), today):
        per_day.append(collect_day(owner, repo, day, config))
        _pause(sleep, config.fetch_delay_ms)
    return build_weekly_report(owner, repo, per_day)


def run(
    config: BotConfig,
    *,
    now_utc: _dt.datetime | None = None,
    local_date: _dt.date | None = None,
    sender: Sender | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunSummary:
    today = local_date or local_now(now_utc, config.offset_minutes).date()
    action = decide_action(today)
    summary = RunSummary(action=action, local_date=today)

    _LOG.info("Run date (local): %s (%s) action=%s", today.isoformat(), _WEEKDAY_NAMES[today.weekday()], action.value)

    if action is Action.SKIP:
        _LOG.info("Sunday, nothing to report")
        return summary

    if sender is None:
        sender = WebhookSender(config.webhook_url)

    target_day = yesterday(today)
    if is_weekend(target_day):
        _LOG.info("Yesterday (%s) was a weekend day, no daily report", target_day.isoformat())
        return summary

    summary.daily_reports = _collect_days(config, target_day, sleep=sleep)
    for report in summary.daily_reports:
        embed = build_daily_embed(report, cap=config.display_cap, offset_minutes=config.offset_minutes)
        _send(summary, sender, embed, config=config, sleep=sleep)

    if action is Action.SATURDAY:
        for repo in config.repositories:
            weekly = _collect_week(config, repo.owner, repo.name, today, sleep=sleep)
            summary.weekly_reports.append(weekly)
            _send(summary, sender, build_weekly_embed(weekly), config=config, sleep=sleep)

    _LOG.info(
        "Run finished action=%s daily=%s weekly=%s sent=%s failed=%s",
        action.value,
        len(summary.daily_reports),
        len(summary.weekly_reports),
        summary.sent,
        summary.send_failures,
    )
    return summary
