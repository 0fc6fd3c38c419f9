# hrms_payroll/services/attendance_reconciler.py
"""
Day-by-day reconciliation of one employee's attendance over a pay period.

Every calendar date in [start, end] is classified exactly once, in priority
order:

  1. active holiday                       -> holidays
  2. weekly-off, when the post pays it    -> holidays
  3. otherwise a scheduled working day    -> working_days, then
       leave record   -> paid_leave_days / unpaid_leave
       punched in     -> present_days += attendance_percentage / 100
                         (the uncredited share of the day goes to absent)
       nothing        -> absent

Pure: no database access, identical inputs give identical metrics.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set

from hrms_payroll.services.rounding import round2

SUNDAY = 6  # date.weekday()


@dataclass(frozen=True)
class AttendanceEntry:
    day: date
    punch_in: Optional[datetime] = None
    punch_out: Optional[datetime] = None
    is_leave: bool = False
    attendance_percentage: float = 0.0
    leave_is_paid: bool = False


@dataclass(frozen=True)
class AttendanceMetrics:
    working_days: float
    present_days: float
    paid_leave_days: float
    unpaid_leave: float
    holidays: float
    absent: float
    total_days_payable: float
    total_days_non_payable: float
    attendance_percentage: float

    def as_dict(self) -> dict:
        return asdict(self)


def _credit(entry: AttendanceEntry) -> float:
    pct = float(entry.attendance_percentage or 0)
    return min(max(pct, 0.0), 100.0) / 100.0


def reconcile(
    entries: Iterable[AttendanceEntry],
    start: date,
    end: date,
    holidays: Set[date],
    weekly_off_paid: bool,
    weekly_off_weekday: int = SUNDAY,
) -> AttendanceMetrics:
    if end < start:
        raise ValueError("period end precedes start")

    # later entries for the same day replace earlier ones
    by_day = {e.day: e for e in entries}

    working = present = paid_leave = unpaid_leave = hol = absent = 0.0

    d = start
    while d <= end:
        if d in holidays:
            hol += 1
        elif weekly_off_paid and d.weekday() == weekly_off_weekday:
            hol += 1
        else:
            working += 1
            rec = by_day.get(d)
            if rec is None:
                absent += 1
            elif rec.is_leave:
                if rec.leave_is_paid:
                    paid_leave += 1
                else:
                    unpaid_leave += 1
            elif rec.punch_in is not None:
                credit = _credit(rec)
                present += credit
                # uncredited share (and a record without punch-in, below) is absent:
                # present + paid + unpaid + absent == working days
                absent += 1 - credit
            else:
                absent += 1
        d += timedelta(days=1)

    payable = present + paid_leave + hol
    non_payable = unpaid_leave + absent
    pct = (present / working * 100) if working > 0 else 0.0

    return AttendanceMetrics(
        working_days=round2(working),
        present_days=round2(present),
        paid_leave_days=round2(paid_leave),
        unpaid_leave=round2(unpaid_leave),
        holidays=round2(hol),
        absent=round2(absent),
        total_days_payable=round2(payable),
        total_days_non_payable=round2(non_payable),
        attendance_percentage=round2(pct),
    )
