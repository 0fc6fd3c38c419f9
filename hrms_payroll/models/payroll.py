from datetime import datetime
from hrms_payroll.extensions import db

PAYROLL_STATUSES = ("draft", "processed", "paid")

class PayrollRecord(db.Model):
    __tablename__ = "payroll_records"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id"), nullable=False, index=True)
    period_key = db.Column(db.String(7), nullable=False, index=True)   # YYYY-MM or WWYY
    type = db.Column(db.String(10), nullable=False, default="Monthly")  # Monthly / Weekly

    # attendance snapshot
    working_days = db.Column(db.Numeric(6, 2), default=0)
    present_days = db.Column(db.Numeric(6, 2), default=0)
    paid_leave_days = db.Column(db.Numeric(6, 2), default=0)
    unpaid_leave = db.Column(db.Numeric(6, 2), default=0)
    absent = db.Column(db.Numeric(6, 2), default=0)
    holidays = db.Column(db.Numeric(6, 2), default=0)
    total_days_payable = db.Column(db.Numeric(6, 2), default=0)
    total_days_non_payable = db.Column(db.Numeric(6, 2), default=0)
    attendance_percentage = db.Column(db.Numeric(6, 2), default=0)

    # earnings snapshot
    basic_salary = db.Column(db.Numeric(14, 2), default=0)
    house_rent_allowance = db.Column(db.Numeric(14, 2), default=0)
    dearness_allowance = db.Column(db.Numeric(14, 2), default=0)
    perquisites = db.Column(db.Numeric(14, 2), default=0)
    others = db.Column(db.Numeric(14, 2), default=0)
    bonus = db.Column(db.Numeric(14, 2), default=0)
    variable_pay = db.Column(db.Numeric(14, 2), default=0)
    gross_salary = db.Column(db.Numeric(14, 2), default=0)
    epf_employer = db.Column(db.Numeric(14, 2), default=0)
    esi_employer = db.Column(db.Numeric(14, 2), default=0)

    # deductions snapshot
    epf_employee = db.Column(db.Numeric(14, 2), default=0)
    esi_employee = db.Column(db.Numeric(14, 2), default=0)
    taxes = db.Column(db.Numeric(14, 2), default=0)
    total_deductions = db.Column(db.Numeric(14, 2), default=0)

    net_salary = db.Column(db.Numeric(14, 2), default=0)
    status = db.Column(db.String(12), nullable=False, default="draft")   # draft|processed|paid
    comments = db.Column(db.Text)

    processed_at = db.Column(db.DateTime)
    paid_at = db.Column(db.DateTime)
    last_modified_by = db.Column(db.String(64))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("employee_id", "period_key", name="uq_payroll_employee_period"),
        db.Index("ix_payroll_status", "status"),
    )

    employee = db.relationship("Employee", lazy="joined")
