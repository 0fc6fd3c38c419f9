# hrms_payroll/blueprints/payroll.py
from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Blueprint, request
from flask_jwt_extended import get_jwt_identity

from hrms_payroll.common.auth import requires_perms
from hrms_payroll.common.errors import ValidationError
from hrms_payroll.common.http import ok
from hrms_payroll.common.paging import page_limit, sort_order
from hrms_payroll.models.payroll import PayrollRecord, PAYROLL_STATUSES
from hrms_payroll.services.manual_adjuster import ManualAdjuster, PayrollPatch
from hrms_payroll.services.payroll_orchestrator import PayrollOrchestrator
from hrms_payroll.services.stores import PayrollStore, EmployeeDirectory

bp = Blueprint("payroll", __name__, url_prefix="/api/v1/payroll")

SORTABLE = {
    "created_at": PayrollRecord.created_at,
    "updated_at": PayrollRecord.updated_at,
    "period_key": PayrollRecord.period_key,
    "net_salary": PayrollRecord.net_salary,
    "gross_salary": PayrollRecord.gross_salary,
}

# ---------- helpers ----------
def _f(x) -> float:
    return float(x) if x is not None else 0.0

def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt else None

def _row(r: PayrollRecord) -> Dict[str, Any]:
    emp = r.employee
    return {
        "id": r.id,
        "employee": {
            "id": r.employee_id,
            "code": emp.code if emp else None,
            "name": emp.full_name if emp else None,
            "post": emp.post.title if emp and emp.post else None,
        },
        "period_key": r.period_key,
        "type": r.type,
        "attendance": {
            "working_days": _f(r.working_days),
            "present_days": _f(r.present_days),
            "paid_leave_days": _f(r.paid_leave_days),
            "unpaid_leave": _f(r.unpaid_leave),
            "absent": _f(r.absent),
            "holidays": _f(r.holidays),
            "total_days_payable": _f(r.total_days_payable),
            "total_days_non_payable": _f(r.total_days_non_payable),
            "attendance_percentage": _f(r.attendance_percentage),
        },
        "earnings": {
            "basic_salary": _f(r.basic_salary),
            "house_rent_allowance": _f(r.house_rent_allowance),
            "dearness_allowance": _f(r.dearness_allowance),
            "perquisites": _f(r.perquisites),
            "others": _f(r.others),
            "bonus": _f(r.bonus),
            "variable_pay": _f(r.variable_pay),
            "gross_salary": _f(r.gross_salary),
            "epf_employer": _f(r.epf_employer),
            "esi_employer": _f(r.esi_employer),
        },
        "deductions": {
            "epf_employee": _f(r.epf_employee),
            "esi_employee": _f(r.esi_employee),
            "taxes": _f(r.taxes),
            "total_deductions": _f(r.total_deductions),
        },
        "net_salary": _f(r.net_salary),
        "status": r.status,
        "comments": r.comments,
        "processed_at": _iso(r.processed_at),
        "paid_at": _iso(r.paid_at),
        "last_modified_by": r.last_modified_by,
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }

def _body() -> Dict[str, Any]:
    j = request.get_json(silent=True)
    return j if isinstance(j, dict) else {}

# ---------- generation ----------
@bp.post("/generate-monthly")
@requires_perms("payroll.records.write")
def generate_monthly():
    j = _body()
    if not j.get("month"):
        raise ValidationError("Month is required")
    res = PayrollOrchestrator().generate_monthly(j["month"])
    return ok(res, period_key=j["month"], type="Monthly")

@bp.post("/generate-weekly")
@requires_perms("payroll.records.write")
def generate_weekly():
    j = _body()
    if not j.get("week"):
        raise ValidationError("Valid week (WWYY) is required")
    res = PayrollOrchestrator().generate_weekly(j["week"])
    return ok(res, period_key=j["week"], type="Weekly")

@bp.post("/process-employee")
@requires_perms("payroll.records.write")
def process_employee():
    j = _body()
    emp_id = j.get("employee_id", j.get("employeeId"))
    rec = PayrollOrchestrator().process_single(emp_id, month=j.get("month"), week=j.get("week"))
    return ok(_row(rec))

# ---------- manual override ----------
@bp.route("/<int:payroll_id>", methods=["PUT", "PATCH"])
@requires_perms("payroll.records.write")
def update_payroll(payroll_id: int):
    patch = PayrollPatch.from_payload(_body())
    rec = ManualAdjuster().update(payroll_id, patch, modified_by=get_jwt_identity())
    return ok(_row(rec))

# ---------- reads ----------
@bp.get("/<int:payroll_id>")
@requires_perms("payroll.records.read")
def get_payroll(payroll_id: int):
    return ok(_row(PayrollStore().get(payroll_id)))

@bp.get("")
@requires_perms("payroll.records.read")
def list_payroll():
    """
    GET /api/v1/payroll
      [?month=YYYY-MM | ?period_key=WWYY]
      [&employee_id=12 | &employee_id=EMP001]
      [&status=draft|processed|paid] [&type=Monthly|Weekly]
      [&page=1&limit=10&sort=created_at&order=desc]
    """
    filters: Dict[str, Any] = {
        "period_key": (request.args.get("month") or request.args.get("period_key") or "").strip() or None,
        "type": (request.args.get("type") or "").strip() or None,
    }
    st = (request.args.get("status") or "").strip().lower()
    if st:
        if st not in PAYROLL_STATUSES:
            raise ValidationError(f"status must be one of {', '.join(PAYROLL_STATUSES)}")
        filters["status"] = st
    emp_q = (request.args.get("employee_id") or request.args.get("employeeId") or "").strip()
    if emp_q:
        filters["employee_id"] = EmployeeDirectory().lookup(emp_q).id

    page, limit = page_limit()
    sort_col, asc = sort_order(SORTABLE)
    rows, total = PayrollStore().list(filters, page, limit, sort_col, asc)
    return ok({
        "items": [_row(x) for x in rows],
        "total": total,
        "total_pages": (total + limit - 1) // limit,
        "current_page": page,
    })
