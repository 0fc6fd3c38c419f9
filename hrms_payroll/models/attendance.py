from datetime import datetime
from hrms_payroll.extensions import db

class Holiday(db.Model):
    __tablename__ = "holidays"
    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    type = db.Column(db.String(20), nullable=False, default="National")  # National/Regional/Company/Optional
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    __table_args__ = (
        db.UniqueConstraint("date", "name", name="uq_holiday_date_name"),
    )

class AttendanceRecord(db.Model):
    __tablename__ = "attendance_records"
    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    work_date = db.Column(db.Date, nullable=False)
    punch_in = db.Column(db.DateTime, nullable=True)
    punch_out = db.Column(db.DateTime, nullable=True)
    is_leave = db.Column(db.Boolean, nullable=False, default=False)
    leave_type_id = db.Column(db.Integer, db.ForeignKey("leave_types.id", ondelete="SET NULL"), nullable=True)
    attendance_percentage = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    month = db.Column(db.String(7), nullable=False, index=True)   # YYYY-MM
    week = db.Column(db.String(4), nullable=False, index=True)    # WWYY
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("employee_id", "work_date", name="uq_attendance_emp_date"),
    )

    leave_type = db.relationship("LeaveType", lazy="joined")
