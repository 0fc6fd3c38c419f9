"""Row builders shared by the database-backed tests."""
from datetime import date, datetime, timedelta

from hrms_payroll.models.post import Post
from hrms_payroll.models.employee import Employee
from hrms_payroll.models.attendance import AttendanceRecord, Holiday
from hrms_payroll.models.payroll import PayrollRecord
from hrms_payroll.services.pay_period import week_key_for


def mk_post(session, payroll_type="Monthly_Without_Sunday_Holiday", basic=30000, **kw):
    defaults = dict(
        title=kw.pop("title", "Engineer"),
        payroll_type=payroll_type,
        salary_basic=basic,
        salary_gross=kw.pop("gross", basic),
        salary_total=kw.pop("total", basic),
    )
    defaults.update(kw)
    p = Post(**defaults)
    session.add(p); session.commit()
    return p


def mk_employee(session, post, code, status="Active", **kw):
    e = Employee(code=code, first_name=kw.pop("first_name", code), post_id=post.id if post else None,
                 status=status, **kw)
    session.add(e); session.commit()
    return e


def mk_attendance(session, emp, start: date, end: date, pct=100, skip=(), **kw):
    d = start
    while d <= end:
        if d not in skip:
            session.add(AttendanceRecord(
                employee_id=emp.id,
                work_date=d,
                punch_in=datetime.combine(d, datetime.min.time()) + timedelta(hours=9),
                punch_out=datetime.combine(d, datetime.min.time()) + timedelta(hours=18),
                attendance_percentage=pct,
                **{"month": d.strftime("%Y-%m"), "week": week_key_for(d), **kw},
            ))
        d += timedelta(days=1)
    session.commit()


def mk_holiday(session, d: date, name="Holiday", active=True):
    h = Holiday(date=d, name=name, is_active=active)
    session.add(h); session.commit()
    return h


def mk_payroll(session, emp, period_key="2025-01", **kw):
    values = dict(
        type="Monthly", status="processed",
        basic_salary=10000, house_rent_allowance=2000, dearness_allowance=1000,
        perquisites=0, others=500, bonus=0, variable_pay=0,
        gross_salary=13000,
        epf_employee=1200, esi_employee=0, taxes=300, total_deductions=1500,
        net_salary=12000,
    )
    values.update(kw)
    r = PayrollRecord(employee_id=emp.id, period_key=period_key, **values)
    session.add(r); session.commit()
    return r
