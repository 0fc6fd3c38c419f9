# hrms_payroll/services/manual_adjuster.py
"""
Manual correction of a stored payroll record.

A patch names only the leaves it changes; every field left as None is
"not supplied" and keeps its stored value. An explicit 0 is a real value.

Derived totals use the override formulas:
  gross      = basic + HRA + DA + perquisites + others + bonus + variable pay
  deductions = EPF + ESI + taxes
  net        = gross - deductions, unless net_salary is supplied
The override gross includes others, bonus and variable pay, unlike the
generated gross; both formulas are kept as they are.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional

from hrms_payroll.common.errors import ValidationError
from hrms_payroll.models.payroll import PayrollRecord, PAYROLL_STATUSES
from hrms_payroll.signals import notify_record_changed
from hrms_payroll.services.rounding import round2
from hrms_payroll.services.stores import PayrollStore

EARNING_FIELDS = (
    "basic_salary", "house_rent_allowance", "dearness_allowance",
    "perquisites", "others", "bonus", "variable_pay",
)
DEDUCTION_FIELDS = ("epf_employee", "esi_employee", "taxes")

# request keys accepted for each leaf (snake_case and the legacy camelCase)
_ALIASES = {
    "basic_salary": ("basic_salary", "basicSalary", "basic"),
    "house_rent_allowance": ("house_rent_allowance", "houseRentAllowance", "hra"),
    "dearness_allowance": ("dearness_allowance", "dearnessAllowance", "da"),
    "perquisites": ("perquisites",),
    "others": ("others",),
    "bonus": ("bonus",),
    "variable_pay": ("variable_pay", "variablePay"),
    "epf_employee": ("epf_employee", "epfEmployee"),
    "esi_employee": ("esi_employee", "esiEmployee"),
    "taxes": ("taxes",),
}


@dataclass(frozen=True)
class PayrollPatch:
    basic_salary: Optional[float] = None
    house_rent_allowance: Optional[float] = None
    dearness_allowance: Optional[float] = None
    perquisites: Optional[float] = None
    others: Optional[float] = None
    bonus: Optional[float] = None
    variable_pay: Optional[float] = None
    epf_employee: Optional[float] = None
    esi_employee: Optional[float] = None
    taxes: Optional[float] = None
    status: Optional[str] = None
    net_salary: Optional[float] = None
    comments: Optional[str] = None

    @classmethod
    def from_payload(cls, j: Dict[str, Any]) -> "PayrollPatch":
        """
        Accepts either nested {"earnings": {...}, "deductions": {...}} or flat keys.
        """
        if not isinstance(j, dict):
            raise ValidationError("Request body must be a JSON object")
        earnings = j.get("earnings") or {}
        deductions = j.get("deductions") or {}
        if not isinstance(earnings, dict) or not isinstance(deductions, dict):
            raise ValidationError("earnings and deductions must be objects")

        kw: Dict[str, Any] = {}
        for name, keys in _ALIASES.items():
            section = earnings if name in EARNING_FIELDS else deductions
            for src in (section, j):
                hit = next((k for k in keys if k in src), None)
                if hit is not None:
                    kw[name] = _amount(src[hit], name)
                    break

        net = j.get("net_salary", j.get("netSalary"))
        if net is not None:
            kw["net_salary"] = _amount(net, "net_salary", allow_negative=True)

        status = j.get("status")
        if status is not None:
            status = str(status).strip().lower()
            if status not in PAYROLL_STATUSES:
                raise ValidationError(f"status must be one of {', '.join(PAYROLL_STATUSES)}")
            kw["status"] = status

        comments = j.get("comments")
        if comments is not None:
            kw["comments"] = str(comments)

        return cls(**kw)

    def supplied(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


def _amount(raw, name: str, allow_negative: bool = False) -> Optional[float]:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        x = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
    if not math.isfinite(x):
        raise ValidationError(f"{name} must be finite")
    if x < 0 and not allow_negative:
        raise ValidationError(f"{name} cannot be negative")
    return round2(x)


def merge_patch(current: Dict[str, float], patch: PayrollPatch) -> Dict[str, Any]:
    """
    Pure merge: `current` holds the stored leaf values. Returns the columns
    to write: every patched leaf plus the recomputed totals.
    """
    given = patch.supplied()
    updates: Dict[str, Any] = {n: given[n] for n in EARNING_FIELDS + DEDUCTION_FIELDS if n in given}

    def eff(name):
        return updates[name] if name in updates else float(current.get(name) or 0)

    gross = round2(sum(eff(n) for n in EARNING_FIELDS))
    total_ded = round2(sum(eff(n) for n in DEDUCTION_FIELDS))
    updates["gross_salary"] = gross
    updates["total_deductions"] = total_ded
    updates["net_salary"] = round2(patch.net_salary if patch.net_salary is not None else gross - total_ded)

    if patch.status is not None:
        updates["status"] = patch.status
    if patch.comments is not None:
        updates["comments"] = patch.comments
    return updates


def _current_values(rec: PayrollRecord) -> Dict[str, float]:
    return {n: float(getattr(rec, n) or 0) for n in EARNING_FIELDS + DEDUCTION_FIELDS}


class ManualAdjuster:
    def __init__(self, payrolls: Optional[PayrollStore] = None):
        self.payrolls = payrolls or PayrollStore()

    def update(self, record_id, patch: PayrollPatch, modified_by: Optional[str] = None) -> PayrollRecord:
        rec = self.payrolls.get(record_id)
        updates = merge_patch(_current_values(rec), patch)

        now = datetime.utcnow()
        if updates.get("status") == "paid" and rec.status != "paid":
            updates["paid_at"] = now
        updates["updated_at"] = now
        if modified_by is not None:
            updates["last_modified_by"] = str(modified_by)

        rec = self.payrolls.save(rec, updates)
        notify_record_changed(self, rec)
        return rec
