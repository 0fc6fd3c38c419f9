# hrms_payroll/services/stores.py
"""
SQLAlchemy-backed collaborators used by the payroll engine.

Each store owns one lookup concern so the orchestrator can be handed
alternative implementations (other datastores, fakes in tests).
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Set
from zoneinfo import ZoneInfo

from hrms_payroll.extensions import db
from hrms_payroll.common.errors import NotFoundError, ValidationError
from hrms_payroll.models.employee import Employee, PAYABLE_STATUSES
from hrms_payroll.models.post import Post
from hrms_payroll.models.attendance import AttendanceRecord, Holiday
from hrms_payroll.models.payroll import PayrollRecord
from hrms_payroll.services.attendance_reconciler import AttendanceEntry
from hrms_payroll.services.pay_period import PayPeriod, MONTHLY, to_calendar_day
from hrms_payroll.services.salary_composer import CompensationConfig


class EmployeeDirectory:
    def lookup(self, employee_id) -> Employee:
        """
        Resolve a business code first; a purely numeric value that matches no
        code falls back to the primary key. Codes such as "1001" therefore
        never reach an unrelated row whose id happens to be 1001.
        """
        if employee_id is None or str(employee_id).strip() == "":
            raise ValidationError("Employee ID is required")
        raw = str(employee_id).strip()

        emp = Employee.query.filter(Employee.code == raw).first()
        if emp is None and raw.isdigit():
            emp = db.session.get(Employee, int(raw))
        if emp is None:
            raise NotFoundError("Employee not found", payload={"employee_id": employee_id})
        return emp

    def eligible(self, period_type: str, statuses: Iterable[str] = PAYABLE_STATUSES) -> List[Employee]:
        """Employees in a payable status whose post is paid on `period_type` (Monthly/Weekly)."""
        return (
            Employee.query
            .join(Post, Post.id == Employee.post_id)
            .filter(Employee.status.in_(list(statuses)))
            .filter(Post.payroll_type.like(f"{period_type}%"))
            .order_by(Employee.id.asc())
            .all()
        )


class CompensationConfigStore:
    def lookup(self, post_id) -> CompensationConfig:
        post = db.session.get(Post, post_id) if post_id is not None else None
        if post is None:
            raise NotFoundError("Post not found", payload={"post_id": post_id})
        return CompensationConfig.from_post(post)


class AttendanceStore:
    def __init__(self, tz: Optional[ZoneInfo] = None):
        self.tz = tz

    def query(self, employee_id: int, period: PayPeriod) -> List[AttendanceEntry]:
        q = (AttendanceRecord.query
             .filter(AttendanceRecord.employee_id == employee_id)
             .filter(AttendanceRecord.work_date >= period.start)
             .filter(AttendanceRecord.work_date <= period.end))
        if period.type == MONTHLY:
            q = q.filter(AttendanceRecord.month == period.period_key)
        rows = q.order_by(AttendanceRecord.work_date.asc(), AttendanceRecord.id.asc()).all()

        out: List[AttendanceEntry] = []
        for r in rows:
            lt = r.leave_type
            out.append(AttendanceEntry(
                day=to_calendar_day(r.work_date, self.tz),
                punch_in=r.punch_in,
                punch_out=r.punch_out,
                is_leave=bool(r.is_leave),
                attendance_percentage=float(r.attendance_percentage or 0),
                leave_is_paid=bool(lt.is_paid) if lt is not None else False,
            ))
        return out


class HolidayCalendar:
    def __init__(self, tz: Optional[ZoneInfo] = None):
        self.tz = tz

    def query(self, start: date, end: date) -> Set[date]:
        rows = (Holiday.query
                .filter(Holiday.is_active.is_(True))
                .filter(Holiday.date >= start)
                .filter(Holiday.date <= end)
                .all())
        return {to_calendar_day(h.date, self.tz) for h in rows}


class PayrollStore:
    def find_one(self, employee_id: int, period_key: str) -> Optional[PayrollRecord]:
        return PayrollRecord.query.filter_by(employee_id=employee_id, period_key=period_key).first()

    def get(self, record_id) -> PayrollRecord:
        try:
            rid = int(record_id)
        except (TypeError, ValueError):
            raise ValidationError("Payroll id must be an integer")
        rec = db.session.get(PayrollRecord, rid)
        if rec is None:
            raise NotFoundError("Payroll record not found", payload={"id": rid})
        return rec

    def upsert(self, employee_id: int, period_key: str, values: Dict[str, Any]) -> PayrollRecord:
        """At most one record per (employee, period_key); later writes replace the snapshot."""
        rec = self.find_one(employee_id, period_key)
        if rec is None:
            rec = PayrollRecord(employee_id=employee_id, period_key=period_key)
            db.session.add(rec)
        for k, v in values.items():
            setattr(rec, k, v)
        db.session.commit()
        return rec

    def save(self, rec: PayrollRecord, values: Dict[str, Any]) -> PayrollRecord:
        for k, v in values.items():
            setattr(rec, k, v)
        db.session.commit()
        return rec

    def list(self, filters: Dict[str, Any], page: int, limit: int, sort_col, asc: bool):
        q = PayrollRecord.query
        if filters.get("period_key"):
            q = q.filter(PayrollRecord.period_key == filters["period_key"])
        if filters.get("status"):
            q = q.filter(PayrollRecord.status == filters["status"])
        if filters.get("type"):
            q = q.filter(PayrollRecord.type == filters["type"])
        if filters.get("employee_id") is not None:
            q = q.filter(PayrollRecord.employee_id == filters["employee_id"])

        total = q.count()
        q = q.order_by(sort_col.asc() if asc else sort_col.desc(), PayrollRecord.id.asc())
        rows = q.offset((page - 1) * limit).limit(limit).all()
        return rows, total
