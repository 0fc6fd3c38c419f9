import math

import pytest

from hrms_payroll.common.errors import ConfigurationError
from hrms_payroll.services.rounding import round2
from hrms_payroll.services.salary_composer import CompensationConfig, compose, PF_WAGE_CAP


def _cfg(**kw):
    base = dict(basic=9000, gross=9000, total=9000)
    base.update(kw)
    return CompensationConfig(**base)


def test_pf_on_full_month_basic():
    out = compose(_cfg(is_pf_payable=True), 30)
    assert out.basic_salary == 9000.00
    assert out.epf_employee == 1080.00
    assert out.epf_employer == 1170.00


def test_pf_basis_capped():
    for basic in (20000, 50000, 1_000_000):
        out = compose(_cfg(basic=basic, is_pf_payable=True), 30)
        assert out.basic_salary > PF_WAGE_CAP
        assert out.epf_employee == 1800.00
        assert out.epf_employer == 1950.00


def test_no_pf_no_esi_when_not_payable():
    out = compose(_cfg(), 30)
    assert out.epf_employee == out.epf_employer == 0
    assert out.esi_employee == out.esi_employer == 0


def test_esi_on_gross():
    out = compose(_cfg(basic=10000, house_rent_allowance=4000, dearness_allowance=2000,
                       perquisites=2000, is_esi_payable=True), 30)
    assert out.gross_salary == 18000.00
    assert out.esi_employee == 135.00
    assert out.esi_employer == 585.00


def test_prorated_over_thirty_day_convention():
    out = compose(_cfg(basic=30000, house_rent_allowance=6000), 31)
    assert out.basic_salary == 31000.00
    assert out.house_rent_allowance == 6200.00

    half = compose(_cfg(basic=30000), 15)
    assert half.basic_salary == 15000.00


def test_gross_excludes_others_bonus_variable_but_net_includes_them():
    out = compose(_cfg(basic=12000, house_rent_allowance=3000, others=1500, bonus=2000,
                       variable_pay=500, taxes=200, is_pf_payable=True), 30)
    assert out.gross_salary == 15000.00
    assert out.others == 1500.00
    assert out.bonus == 2000.00 and out.variable_pay == 500.00
    assert out.total_deductions == 1440.00 + 200.00
    assert out.net_salary == 15000.00 + 2000.00 + 500.00 + 1500.00 - 1640.00


def test_bonus_and_variable_pay_not_prorated():
    out = compose(_cfg(bonus=5000, variable_pay=1000), 10)
    assert out.basic_salary == 3000.00
    assert out.bonus == 5000.00
    assert out.variable_pay == 1000.00


def test_zero_payable_days():
    out = compose(_cfg(basic=20000, bonus=1000, is_pf_payable=True, is_esi_payable=True, taxes=100), 0)
    assert out.gross_salary == 0
    assert out.epf_employee == 0
    assert out.net_salary == 900.00


@pytest.mark.parametrize("missing", ["basic", "gross", "total"])
def test_missing_mandatory_config_fails_fast(missing):
    with pytest.raises(ConfigurationError):
        compose(_cfg(**{missing: None}), 30)


def test_compose_is_pure():
    cfg = _cfg(basic=23456.78, house_rent_allowance=1234.5, is_pf_payable=True, is_esi_payable=True)
    assert compose(cfg, 27.5) == compose(cfg, 27.5)


def test_all_amounts_are_finite_and_two_decimal():
    out = compose(_cfg(basic=33333.33, dearness_allowance=777.77, is_pf_payable=True, is_esi_payable=True), 29.33)
    for v in out.as_dict().values():
        assert math.isfinite(v)
        assert round2(v) == v


@pytest.mark.parametrize("x", [0, 1.005, 2.675, 1234.565, 0.1 + 0.2, 99999.995, 1 / 3, 10.0])
def test_round2_idempotent(x):
    assert round2(round2(x)) == round2(x)


def test_round2_half_up_against_binary_error():
    assert round2(1.005) == 1.01
    assert round2(0.1 + 0.2) == 0.3


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), -float("inf")])
def test_round2_rejects_non_finite(bad):
    with pytest.raises(ValueError):
        round2(bad)
