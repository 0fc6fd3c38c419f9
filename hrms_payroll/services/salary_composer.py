# hrms_payroll/services/salary_composer.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional

from hrms_payroll.common.errors import ConfigurationError
from hrms_payroll.services.rounding import round2

# Monthly amounts are prorated over a conventional 30-day month whatever
# the real length of the pay period.
DAILY_RATE = 1 / 30

PF_WAGE_CAP = 15000
PF_EMPLOYEE_RATE = 0.12
PF_EMPLOYER_RATE = 0.13
ESI_EMPLOYEE_RATE = 0.0075
ESI_EMPLOYER_RATE = 0.0325

MANDATORY_FIELDS = ("basic", "gross", "total")


def _num(x) -> Optional[float]:
    return None if x is None else float(x)


@dataclass(frozen=True)
class CompensationConfig:
    basic: Optional[float]
    gross: Optional[float]
    total: Optional[float]
    house_rent_allowance: float = 0.0
    dearness_allowance: float = 0.0
    perquisites: float = 0.0
    others: float = 0.0
    bonus: float = 0.0
    variable_pay: float = 0.0
    taxes: float = 0.0
    is_pf_payable: bool = False
    is_esi_payable: bool = False
    weekly_off_paid: bool = False

    @classmethod
    def from_post(cls, post) -> "CompensationConfig":
        return cls(
            basic=_num(post.salary_basic),
            gross=_num(post.salary_gross),
            total=_num(post.salary_total),
            house_rent_allowance=_num(post.house_rent_allowance) or 0.0,
            dearness_allowance=_num(post.dearness_allowance) or 0.0,
            perquisites=_num(post.perquisites) or 0.0,
            others=_num(post.others) or 0.0,
            bonus=_num(post.bonus) or 0.0,
            variable_pay=_num(post.variable_pay) or 0.0,
            taxes=_num(post.taxes) or 0.0,
            is_pf_payable=bool(post.is_pf_payable),
            is_esi_payable=bool(post.is_esi_payable),
            weekly_off_paid=bool(post.weekly_off_paid),
        )

    def validate(self):
        missing = [f for f in MANDATORY_FIELDS if getattr(self, f) is None]
        if missing:
            raise ConfigurationError(
                f"Salary configuration is missing: {', '.join(missing)}",
                payload={"missing": missing},
            )


@dataclass(frozen=True)
class SalaryComponents:
    basic_salary: float
    house_rent_allowance: float
    dearness_allowance: float
    perquisites: float
    others: float
    bonus: float
    variable_pay: float
    gross_salary: float
    epf_employee: float
    epf_employer: float
    esi_employee: float
    esi_employer: float
    taxes: float
    total_deductions: float
    net_salary: float

    def as_dict(self) -> dict:
        return asdict(self)


def prorate(amount: float, days_payable: float) -> float:
    return round2(amount * days_payable * DAILY_RATE)


def compose(config: CompensationConfig, total_days_payable: float) -> SalaryComponents:
    """
    Turn a post's monthly salary configuration and the payable day count
    into salary components. Every amount is rounded where it is computed.

    Gross here is basic + DA + HRA + perquisites only; others, bonus and
    variable pay join at the net stage.
    """
    config.validate()
    days = float(total_days_payable)

    basic = prorate(config.basic, days)
    hra = prorate(config.house_rent_allowance, days)
    da = prorate(config.dearness_allowance, days)
    perqs = prorate(config.perquisites, days)
    others = prorate(config.others, days)
    bonus = round2(config.bonus)
    variable = round2(config.variable_pay)

    gross = round2(basic + da + hra + perqs)

    if config.is_pf_payable:
        pf_basis = min(basic, PF_WAGE_CAP)
        epf_emp = round2(pf_basis * PF_EMPLOYEE_RATE)
        epf_er = round2(pf_basis * PF_EMPLOYER_RATE)
    else:
        epf_emp = epf_er = 0.0

    if config.is_esi_payable:
        esi_emp = round2(gross * ESI_EMPLOYEE_RATE)
        esi_er = round2(gross * ESI_EMPLOYER_RATE)
    else:
        esi_emp = esi_er = 0.0

    taxes = round2(config.taxes)
    total_deductions = round2(epf_emp + esi_emp + taxes)
    net = round2(gross + bonus + variable + others - total_deductions)

    return SalaryComponents(
        basic_salary=basic,
        house_rent_allowance=hra,
        dearness_allowance=da,
        perquisites=perqs,
        others=others,
        bonus=bonus,
        variable_pay=variable,
        gross_salary=gross,
        epf_employee=epf_emp,
        epf_employer=epf_er,
        esi_employee=esi_emp,
        esi_employer=esi_er,
        taxes=taxes,
        total_deductions=total_deductions,
        net_salary=net,
    )
