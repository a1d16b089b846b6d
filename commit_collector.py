from __future__ import annotations

import datetime as _dt
import http.client
import json
from dataclasses import dataclass, field
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from pydantic import ValidationError

from commit_filter import apply_filters
from config import BotConfig
from logger import get_logger
from models import CommitRecord, DayReport, TimeWindow
from reporter import build_day_report, format_date_label
from time_window import api_timestamp, window_for_local_day


_LOG = get_logger()

API_BASE = "https://api.github.com"
DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class FetchResult:
    ok: bool
    commits: list[CommitRecord] = field(default_factory=list)
    error: str | None = None


def _headers(token: str | None) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": "algo-commit-bot/1.0",
    }
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


def _commits_url(owner: str, repo: str, window: TimeWindow, page_size: int) -> str:
    # The API's "until" is inclusive and second-granular; stepping back one
    # second keeps the window half-open.
    params = {
        "since": api_timestamp(window.since_utc),
        "until": api_timestamp(window.until_utc - _dt.timedelta(seconds=1)),
        "per_page": page_size,
    }
    path = f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/commits"
    return f"{API_BASE}{path}?{urlencode(params)}"


def _parse_commits(raw: bytes) -> list[CommitRecord]:
    data: Any = json.loads((raw or b"[]").decode("utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON list, got {type(data).__name__}")
    return [CommitRecord.from_api(item) for item in data]


def fetch_commits(
    owner: str,
    repo: str,
    window: TimeWindow,
    *,
    token: str | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    timeout: int = 30,
) -> FetchResult:
    """Fetch a single page of commits authored inside ``window``.

    Only the first page is read; a day with more than ``page_size`` commits
    is truncated. Every failure becomes ``FetchResult(ok=False)``.
    """
    url = _commits_url(owner, repo, window, page_size)
    req = Request(url, headers=_headers(token), method="GET")

    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read() or b""
    except HTTPError as e:
        body_preview = b""
        try:
            body_preview = (e.read() or b"")[:300]
        except OSError:
            body_preview = b""
        detail = body_preview.decode("utf-8", errors="replace").strip()
        error = f"HTTP {e.code}: {detail or e.reason}"
        _LOG.error("GitHub fetch failed repo=%s/%s %s", owner, repo, error)
        return FetchResult(ok=False, error=error)
    except (URLError, OSError, http.client.HTTPException) as e:
        error = f"network error: {getattr(e, 'reason', e)}"
        _LOG.error("GitHub fetch failed repo=%s/%s %s", owner, repo, error)
        return FetchResult(ok=False, error=error)

    try:
        commits = _parse_commits(raw)
    except (ValueError, KeyError, TypeError, ValidationError) as e:
        error = f"malformed response: {e}"
        _LOG.error("GitHub fetch failed repo=%s/%s %s", owner, repo, error)
        return FetchResult(ok=False, error=error)

    if len(commits) >= page_size:
        _LOG.warning(
            "GitHub page full repo=%s/%s count=%s; later commits are not fetched",
            owner,
            repo,
            len(commits),
        )

    _LOG.info(
        "GitHub fetch ok repo=%s/%s since=%s until=%s count=%s",
        owner,
        repo,
        api_timestamp(window.since_utc),
        api_timestamp(window.until_utc),
        len(commits),
    )
    return FetchResult(ok=True, commits=commits)


def collect_day(owner: str, repo: str, local_date: _dt.date, config: BotConfig) -> DayReport:
    window = window_for_local_day(local_date, config.offset_minutes)
    result = fetch_commits(
        owner,
        repo,
        window,
        token=config.github_token,
        page_size=config.page_size,
    )

    commits: list[CommitRecord] = []
    if result.ok:
        commits = apply_filters(
            result.commits,
            dedupe_enabled=config.dedupe_enabled,
            exclude_prefix=config.exclude_prefix,
        )
        if len(commits) != len(result.commits):
            _LOG.info(
                "commit_filter repo=%s/%s fetched=%s kept=%s",
                owner,
                repo,
                len(result.commits),
                len(commits),
            )

    return build_day_report(
        owner,
        repo,
        format_date_label(local_date),
        commits,
        result.error if not result.ok else None,
        config.target_count,
        local_date=local_date,
    )
