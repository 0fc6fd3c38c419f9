from datetime import datetime
from hrms_payroll.extensions import db

class LeaveType(db.Model):
    __tablename__ = "leave_types"
    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    is_paid = db.Column(db.Boolean, nullable=False, default=True)
    total_leaves = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    carry_forward = db.Column(db.Boolean, nullable=False, default=False)
    validity_days = db.Column(db.Integer, nullable=False, default=365)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

class LeaveBalance(db.Model):
    __tablename__ = "leave_balances"
    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type_id = db.Column(db.Integer, db.ForeignKey("leave_types.id", ondelete="CASCADE"), nullable=False, index=True)
    used = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    remaining = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    last_refreshed = db.Column(db.Date, nullable=True)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("employee_id", "leave_type_id", name="uq_leave_balance_emp_type"),
    )

    leave_type = db.relationship("LeaveType")
