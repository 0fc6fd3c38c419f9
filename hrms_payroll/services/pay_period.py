# hrms_payroll/services/pay_period.py
from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from hrms_payroll.common.errors import ValidationError

MONTHLY = "Monthly"
WEEKLY = "Weekly"

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_WEEK_RE = re.compile(r"^(\d{2})(\d{2})$")


@dataclass(frozen=True)
class MonthId:
    year: int
    month: int

    @classmethod
    def parse(cls, raw) -> "MonthId":
        m = _MONTH_RE.match(str(raw or "").strip())
        if not m:
            raise ValidationError("Valid month (YYYY-MM) is required")
        year, month = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            raise ValidationError(f"Month out of range in '{raw}'")
        return cls(year, month)

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class WeekId:
    """ISO week identifier written as WWYY, e.g. '0225' = week 2 of 2025."""
    week: int
    year: int

    @classmethod
    def parse(cls, raw) -> "WeekId":
        m = _WEEK_RE.match(str(raw or "").strip())
        if not m:
            raise ValidationError("Valid week (WWYY) is required")
        week, year = int(m.group(1)), 2000 + int(m.group(2))
        if not 1 <= week <= 53:
            raise ValidationError(f"Week out of range in '{raw}'")
        try:
            date.fromisocalendar(year, week, 1)
        except ValueError:
            raise ValidationError(f"ISO year {year} has no week {week}")
        return cls(week, year)

    @property
    def key(self) -> str:
        return f"{self.week:02d}{self.year % 100:02d}"

    def monday(self) -> date:
        return date.fromisocalendar(self.year, self.week, 1)


@dataclass(frozen=True)
class PayPeriod:
    type: str
    start: date
    end: date
    period_key: str

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        for i in range(self.total_days):
            yield self.start + timedelta(days=i)


def resolve_month(raw) -> PayPeriod:
    mid = MonthId.parse(raw)
    last = calendar.monthrange(mid.year, mid.month)[1]
    return PayPeriod(MONTHLY, date(mid.year, mid.month, 1), date(mid.year, mid.month, last), mid.key)


def resolve_week(raw) -> PayPeriod:
    wid = WeekId.parse(raw)
    start = wid.monday()
    return PayPeriod(WEEKLY, start, start + timedelta(days=6), wid.key)


def week_key_for(d: date) -> str:
    iso = d.isocalendar()
    return f"{iso[1]:02d}{iso[0] % 100:02d}"


def to_calendar_day(value, tz: Optional[ZoneInfo] = None) -> date:
    """
    Collapse a date/datetime to the calendar day in the canonical timezone.
    Naive datetimes are taken to be in that timezone already.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])
