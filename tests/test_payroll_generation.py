from datetime import date

import pytest

from hrms_payroll.common.errors import ConfigurationError, NotFoundError, ValidationError
from hrms_payroll.models.payroll import PayrollRecord
from hrms_payroll.services.payroll_orchestrator import PayrollOrchestrator
from hrms_payroll.signals import payroll_batch_generated, payroll_record_changed
from tests.factories import mk_attendance, mk_employee, mk_holiday, mk_post

JAN_START, JAN_END = date(2025, 1, 1), date(2025, 1, 31)


def test_monthly_batch_selects_payable_monthly_employees(session):
    monthly = mk_post(session, basic=30000)
    weekly = mk_post(session, payroll_type="Weekly_Without_Sunday_Holiday", basic=3000)
    a = mk_employee(session, monthly, "E001")
    b = mk_employee(session, monthly, "E002", status="Probation")
    mk_employee(session, monthly, "E003", status="Terminated")
    mk_employee(session, weekly, "W001")
    mk_attendance(session, a, JAN_START, JAN_END)
    mk_attendance(session, b, JAN_START, JAN_END)

    res = PayrollOrchestrator().generate_monthly("2025-01")

    assert res == {"processed": 2, "failed": 0, "failed_records": []}
    rows = PayrollRecord.query.order_by(PayrollRecord.employee_id).all()
    assert [r.employee_id for r in rows] == [a.id, b.id]
    r = rows[0]
    assert r.period_key == "2025-01"
    assert r.type == "Monthly"
    assert r.status == "processed"
    assert r.processed_at is not None
    assert float(r.working_days) == 31
    assert float(r.present_days) == 31
    assert float(r.attendance_percentage) == 100
    assert float(r.basic_salary) == 31000.00


def test_failure_for_one_employee_does_not_abort_batch(session):
    good = mk_post(session, basic=15000)
    broken = mk_post(session, basic=15000, gross=None)
    mk_employee(session, good, "E001")
    mk_employee(session, broken, "E002")
    mk_employee(session, good, "E003")

    res = PayrollOrchestrator().generate_monthly("2025-01")

    assert res["processed"] == 2
    assert res["failed"] == 1
    assert res["failed_records"][0]["employee_id"] == "E002"
    assert "gross" in res["failed_records"][0]["error"]
    assert PayrollRecord.query.count() == 2


def test_regeneration_replaces_existing_record(session):
    post = mk_post(session, basic=30000)
    emp = mk_employee(session, post, "E001")
    mk_attendance(session, emp, JAN_START, JAN_END)

    orch = PayrollOrchestrator()
    orch.generate_monthly("2025-01")
    first = PayrollRecord.query.one()
    first_id, first_net = first.id, float(first.net_salary)

    post.salary_basic = 60000
    session.commit()
    orch.generate_monthly("2025-01")

    rows = PayrollRecord.query.all()
    assert len(rows) == 1
    assert rows[0].id == first_id
    assert float(rows[0].net_salary) == pytest.approx(first_net * 2)


def test_attendance_outside_month_key_is_ignored(session):
    post = mk_post(session, basic=30000)
    emp = mk_employee(session, post, "E001")
    mk_attendance(session, emp, JAN_START, date(2025, 1, 10), month="2024-12")

    rec = PayrollOrchestrator().process_single("E001", month="2025-01")
    assert float(rec.present_days) == 0
    assert float(rec.absent) == 31


def test_weekly_with_paid_sunday(session):
    post = mk_post(session, payroll_type="Weekly_With_Sunday_Holiday", basic=3000)
    emp = mk_employee(session, post, "W001")
    mk_attendance(session, emp, date(2025, 1, 6), date(2025, 1, 11))

    res = PayrollOrchestrator().generate_weekly("0225")

    assert res["processed"] == 1
    rec = PayrollRecord.query.one()
    assert rec.period_key == "0225"
    assert rec.type == "Weekly"
    assert float(rec.working_days) == 6
    assert float(rec.holidays) == 1
    assert float(rec.total_days_payable) == 7
    assert float(rec.basic_salary) == 700.00


def test_inactive_holiday_is_a_working_day(session):
    post = mk_post(session, payroll_type="Weekly_Without_Sunday_Holiday", basic=3000)
    emp = mk_employee(session, post, "W001")
    mk_attendance(session, emp, date(2025, 1, 6), date(2025, 1, 12), skip={date(2025, 1, 8)})
    mk_holiday(session, date(2025, 1, 8), "Cancelled", active=False)

    rec = PayrollOrchestrator().process_single(emp.id, week="0225")
    assert float(rec.holidays) == 0
    assert float(rec.absent) == 1


def test_active_holiday_is_payable(session):
    post = mk_post(session, payroll_type="Weekly_Without_Sunday_Holiday", basic=3000)
    emp = mk_employee(session, post, "W001")
    mk_attendance(session, emp, date(2025, 1, 6), date(2025, 1, 12), skip={date(2025, 1, 8)})
    mk_holiday(session, date(2025, 1, 8), "Festival")

    rec = PayrollOrchestrator().process_single(emp.id, week="0225")
    assert float(rec.holidays) == 1
    assert float(rec.total_days_payable) == 7


@pytest.mark.parametrize("month", ["2025-13", "25-01", "", None, "January"])
def test_invalid_month_rejected(session, month):
    with pytest.raises(ValidationError):
        PayrollOrchestrator().generate_monthly(month)


@pytest.mark.parametrize("week", ["5425", "0025", "225", "5325"])
def test_invalid_week_rejected(session, week):
    with pytest.raises(ValidationError):
        PayrollOrchestrator().generate_weekly(week)


def test_single_requires_matching_period_kind(session):
    monthly = mk_post(session)
    weekly = mk_post(session, payroll_type="Weekly_With_Sunday_Holiday")
    mk_employee(session, monthly, "E001")
    mk_employee(session, weekly, "W001")
    orch = PayrollOrchestrator()

    with pytest.raises(ValidationError, match="Month"):
        orch.process_single("E001", week="0225")
    with pytest.raises(ValidationError, match="Week"):
        orch.process_single("W001", month="2025-01")


def test_single_unknown_employee_and_missing_post(session):
    mk_employee(session, None, "E404")
    bad_type = mk_post(session, payroll_type="Fortnightly")
    mk_employee(session, bad_type, "E500")
    orch = PayrollOrchestrator()

    with pytest.raises(NotFoundError):
        orch.process_single("NOPE", month="2025-01")
    with pytest.raises(NotFoundError):
        orch.process_single("E404", month="2025-01")
    with pytest.raises(ConfigurationError):
        orch.process_single("E500", month="2025-01")
    with pytest.raises(ValidationError):
        orch.process_single("", month="2025-01")


def test_single_accepts_primary_key_or_code(session):
    post = mk_post(session, basic=30000)
    emp = mk_employee(session, post, "E001")
    orch = PayrollOrchestrator()

    by_code = orch.process_single("E001", month="2025-02")
    by_id = orch.process_single(str(emp.id), month="2025-02")
    assert by_code.id == by_id.id
    assert PayrollRecord.query.count() == 1


def test_signals_emitted(session):
    post = mk_post(session, basic=30000)
    emp = mk_employee(session, post, "E001")
    changed, batches = [], []

    def on_change(sender, **kw):
        changed.append(kw)

    def on_batch(sender, **kw):
        batches.append(kw)

    with payroll_record_changed.connected_to(on_change), payroll_batch_generated.connected_to(on_batch):
        PayrollOrchestrator().generate_monthly("2025-01")

    rec = PayrollRecord.query.one()
    assert changed == [{"record_id": rec.id, "employee_id": emp.id, "period_key": "2025-01"}]
    assert batches == [{"period_key": "2025-01", "period_type": "Monthly", "processed": 1, "failed": 0}]


def test_settings_from_app_config(app, session):
    app.config["PAYROLL_ELIGIBLE_STATUSES"] = ("Active",)
    post = mk_post(session)
    mk_employee(session, post, "E001")
    mk_employee(session, post, "E002", status="Probation")

    res = PayrollOrchestrator().generate_monthly("2025-01")
    assert res["processed"] == 1


def test_numeric_code_wins_over_primary_key(session):
    post = mk_post(session, basic=30000)
    first = mk_employee(session, post, "2")
    second = mk_employee(session, post, "E-XYZ")
    assert second.id == 2

    rec = PayrollOrchestrator().process_single("2", month="2025-01")
    assert rec.employee_id == first.id
    assert PayrollRecord.query.filter_by(employee_id=second.id).count() == 0

    # a number matching no code still resolves the primary key
    by_id = PayrollOrchestrator().process_single(str(first.id), month="2025-01")
    assert by_id.employee_id == first.id


def test_failing_receiver_does_not_fail_stored_record(session):
    mk_employee(session, mk_post(session), "E001")

    def broken(sender, **kw):
        raise RuntimeError("cache down")

    with payroll_record_changed.connected_to(broken), payroll_batch_generated.connected_to(broken):
        res = PayrollOrchestrator().generate_monthly("2025-01")

    assert res == {"processed": 1, "failed": 0, "failed_records": []}
    assert PayrollRecord.query.count() == 1
