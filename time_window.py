from __future__ import annotations

import datetime as _dt
from typing import Iterator

from models import TimeWindow


DEFAULT_OFFSET_MINUTES = 540

_UTC = _dt.timezone.utc
_ONE_DAY = _dt.timedelta(days=1)


def window_for_local_day(day: _dt.date, offset_minutes: int = DEFAULT_OFFSET_MINUTES) -> TimeWindow:
    """Return the UTC range covering one calendar day in a fixed-offset zone.

    Only the year/month/day of ``day`` are used. The host timezone never
    participates: local midnight is built as a UTC instant and shifted back
    by the offset.
    """
    local_midnight = _dt.datetime(day.year, day.month, day.day, tzinfo=_UTC)
    since = local_midnight - _dt.timedelta(minutes=offset_minutes)
    return TimeWindow(since_utc=since, until_utc=since + _ONE_DAY)


def local_now(
    now_utc: _dt.datetime | None = None,
    offset_minutes: int = DEFAULT_OFFSET_MINUTES,
) -> _dt.datetime:
    """Wall-clock time in the fixed-offset zone, as a naive datetime."""
    if now_utc is None:
        now_utc = _dt.datetime.now(_UTC)
    elif now_utc.tzinfo is None:
        now_utc = now_utc.replace(tzinfo=_UTC)
    shifted = now_utc.astimezone(_UTC) + _dt.timedelta(minutes=offset_minutes)
    return shifted.replace(tzinfo=None)


def to_local(instant: _dt.datetime, offset_minutes: int = DEFAULT_OFFSET_MINUTES) -> _dt.datetime:
    return local_now(instant, offset_minutes)


def api_timestamp(instant: _dt.datetime) -> str:
    return instant.astimezone(_UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def yesterday(reference: _dt.date) -> _dt.date:
    return reference - _ONE_DAY


def is_weekend(day: _dt.date) -> bool:
    return day.weekday() >= 5


def monday_of_week(reference: _dt.date) -> _dt.date:
    # weekday(): Monday == 0 ... Sunday == 6, so Sunday goes back six days.
    return reference - _dt.timedelta(days=reference.weekday())


class WeekdaySpan:
    """Mon..Fri of one week, cut at ``until``. Iterating again starts over."""

    def __init__(self, monday: _dt.date, until: _dt.date) -> None:
        self.monday = monday
        self.until = until

    def __iter__(self) -> Iterator[_dt.date]:
        for i in range(5):
            day = self.monday + _dt.timedelta(days=i)
            if day > self.until:
                return
            yield day

    def __repr__(self) -> str:
        return f"WeekdaySpan(monday={self.monday!r}, until={self.until!r})"


def weekdays_up_to(monday: _dt.date, reference: _dt.date) -> WeekdaySpan:
    return WeekdaySpan(monday, reference)
