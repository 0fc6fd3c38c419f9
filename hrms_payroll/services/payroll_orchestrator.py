# hrms_payroll/services/payroll_orchestrator.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from flask import current_app

from hrms_payroll.extensions import db
from hrms_payroll.common.errors import APIError, ConfigurationError, NotFoundError, ValidationError
from hrms_payroll.models.employee import Employee, PAYABLE_STATUSES
from hrms_payroll.models.payroll import PayrollRecord
from hrms_payroll.signals import notify_batch_generated, notify_record_changed
from hrms_payroll.services.attendance_reconciler import AttendanceMetrics, SUNDAY, reconcile
from hrms_payroll.services.salary_composer import SalaryComponents, compose
from hrms_payroll.services.pay_period import PayPeriod, MONTHLY, WEEKLY, resolve_month, resolve_week
from hrms_payroll.services.stores import (
    AttendanceStore, CompensationConfigStore, EmployeeDirectory, HolidayCalendar, PayrollStore,
)

log = logging.getLogger(__name__)


def _cfg(key: str, default):
    try:
        return current_app.config.get(key, default)
    except RuntimeError:
        # outside an application context
        return default


class PayrollOrchestrator:
    """
    Drives payroll generation: resolve the period, pick employees, reconcile
    attendance, compose salary and upsert one record per (employee, period).

    Employees are processed one after another; a failure for one employee is
    recorded and the batch carries on.
    """

    def __init__(
        self,
        employees: Optional[EmployeeDirectory] = None,
        configs: Optional[CompensationConfigStore] = None,
        attendance: Optional[AttendanceStore] = None,
        holidays: Optional[HolidayCalendar] = None,
        payrolls: Optional[PayrollStore] = None,
        weekly_off_weekday: Optional[int] = None,
        eligible_statuses: Optional[Iterable[str]] = None,
    ):
        tz = ZoneInfo(_cfg("PAYROLL_TIMEZONE", "Asia/Kolkata"))
        self.employees = employees or EmployeeDirectory()
        self.configs = configs or CompensationConfigStore()
        self.attendance = attendance or AttendanceStore(tz)
        self.holidays = holidays or HolidayCalendar(tz)
        self.payrolls = payrolls or PayrollStore()
        self.weekly_off_weekday = (
            weekly_off_weekday if weekly_off_weekday is not None
            else int(_cfg("PAYROLL_WEEKLY_OFF_WEEKDAY", SUNDAY))
        )
        self.eligible_statuses = tuple(
            eligible_statuses or _cfg("PAYROLL_ELIGIBLE_STATUSES", PAYABLE_STATUSES)
        )

    # ---------- batch ----------
    def generate_monthly(self, month) -> Dict[str, Any]:
        return self._generate(resolve_month(month))

    def generate_weekly(self, week) -> Dict[str, Any]:
        return self._generate(resolve_week(week))

    def _generate(self, period: PayPeriod) -> Dict[str, Any]:
        emps = self.employees.eligible(period.type, self.eligible_statuses)
        results: Dict[str, Any] = {"processed": 0, "failed": 0, "failed_records": []}

        for emp in emps:
            try:
                self._process(emp, period)
                results["processed"] += 1
            except APIError as e:
                db.session.rollback()
                results["failed"] += 1
                results["failed_records"].append({"employee_id": emp.code, "error": e.message})
                log.warning("[payroll.generate] %s %s skipped for %s: %s",
                            period.type, period.period_key, emp.code, e.message)
            except Exception as e:
                db.session.rollback()
                results["failed"] += 1
                results["failed_records"].append({"employee_id": emp.code, "error": str(e)})
                log.warning("[payroll.generate] %s %s failed for %s",
                            period.type, period.period_key, emp.code, exc_info=True)

        log.info("[payroll.generate] %s %s processed=%s failed=%s",
                 period.type, period.period_key, results["processed"], results["failed"])
        notify_batch_generated(
            self,
            period_key=period.period_key,
            period_type=period.type,
            processed=results["processed"],
            failed=results["failed"],
        )
        return results

    # ---------- single ----------
    def process_single(self, employee_id, month=None, week=None) -> PayrollRecord:
        emp = self.employees.lookup(employee_id)
        if emp.post is None:
            raise NotFoundError("Post not found for employee", payload={"employee_id": emp.code})

        ptype = emp.post.period_type
        if ptype == MONTHLY:
            if not month:
                raise ValidationError("Month (YYYY-MM) is required for this employee")
            period = resolve_month(month)
        elif ptype == WEEKLY:
            if not week:
                raise ValidationError("Week (WWYY) is required for this employee")
            period = resolve_week(week)
        else:
            raise ConfigurationError("Invalid or missing payroll type configuration")

        return self._process(emp, period)

    # ---------- per employee ----------
    def compute(self, emp: Employee, period: PayPeriod) -> Tuple[AttendanceMetrics, SalaryComponents]:
        config = self.configs.lookup(emp.post_id)
        config.validate()
        entries = self.attendance.query(emp.id, period)
        holidays = self.holidays.query(period.start, period.end)
        metrics = reconcile(
            entries,
            period.start,
            period.end,
            holidays,
            weekly_off_paid=config.weekly_off_paid,
            weekly_off_weekday=self.weekly_off_weekday,
        )
        return metrics, compose(config, metrics.total_days_payable)

    def _process(self, emp: Employee, period: PayPeriod) -> PayrollRecord:
        metrics, comps = self.compute(emp, period)
        values = {
            "type": period.type,
            **metrics.as_dict(),
            **comps.as_dict(),
            "status": "processed",
            "processed_at": datetime.utcnow(),
        }
        rec = self.payrolls.upsert(emp.id, period.period_key, values)
        notify_record_changed(self, rec)
        return rec
