# hrms_payroll/services/leave_balance.py
"""
Periodic leave balance refresh as a pure function.

A refresh is due when the employee's days of service since joining is a
positive multiple of the leave type's validity window. Carry-forward leave
types keep the unused remainder on top of a fresh entitlement; the others
reset to the entitlement. Usage restarts at zero either way.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Tuple, Union

from hrms_payroll.services.rounding import round2


@dataclass(frozen=True)
class CarryForward:
    amount: float


@dataclass(frozen=True)
class Reset:
    pass


RefreshDecision = Union[CarryForward, Reset]


@dataclass(frozen=True)
class BalanceSnapshot:
    leave_type_id: int
    used: float
    remaining: float
    last_refreshed: Optional[date] = None


@dataclass(frozen=True)
class LeavePolicy:
    total_leaves: float
    carry_forward: bool = False
    validity_days: int = 365


def refresh_due(join_date: date, on_date: date, validity_days: int) -> bool:
    if validity_days <= 0:
        return False
    served = (on_date - join_date).days
    return served > 0 and served % validity_days == 0


def refresh_balance(
    balance: BalanceSnapshot,
    policy: LeavePolicy,
    join_date: date,
    on_date: date,
) -> Tuple[BalanceSnapshot, Optional[RefreshDecision]]:
    """Return (new snapshot, decision); decision is None when no refresh was due."""
    if balance.last_refreshed == on_date or not refresh_due(join_date, on_date, policy.validity_days):
        return balance, None

    entitlement = float(policy.total_leaves)
    if policy.carry_forward:
        decision: RefreshDecision = CarryForward(round2(max(float(balance.remaining), 0.0)))
        remaining = round2(entitlement + decision.amount)
    else:
        decision = Reset()
        remaining = round2(entitlement)

    return replace(balance, used=0.0, remaining=remaining, last_refreshed=on_date), decision


def refresh_employee_balances(employee, on_date: date) -> int:
    """Apply refresh_balance to every stored balance of one employee; returns rows changed."""
    from hrms_payroll.extensions import db
    from hrms_payroll.models.leave import LeaveBalance

    if employee.date_of_joining is None:
        return 0

    changed = 0
    for row in LeaveBalance.query.filter_by(employee_id=employee.id).all():
        lt = row.leave_type
        snap = BalanceSnapshot(
            leave_type_id=row.leave_type_id,
            used=float(row.used or 0),
            remaining=float(row.remaining or 0),
            last_refreshed=row.last_refreshed,
        )
        policy = LeavePolicy(
            total_leaves=float(lt.total_leaves or 0),
            carry_forward=bool(lt.carry_forward),
            validity_days=int(lt.validity_days or 0),
        )
        new, decision = refresh_balance(snap, policy, employee.date_of_joining, on_date)
        if decision is None:
            continue
        row.used = new.used
        row.remaining = new.remaining
        row.last_refreshed = new.last_refreshed
        changed += 1

    db.session.commit()
    return changed
