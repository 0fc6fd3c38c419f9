from datetime import datetime
from hrms_payroll.extensions import db

class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(120), nullable=False, index=True)
    payroll_type = db.Column(db.String(40), nullable=True)   # (Weekly|Monthly)_(With|Without)_Sunday_Holiday

    is_pf_payable = db.Column(db.Boolean, nullable=False, default=False)
    is_esi_payable = db.Column(db.Boolean, nullable=False, default=False)

    # monthly salary configuration
    salary_basic = db.Column(db.Numeric(14, 2), nullable=True)
    house_rent_allowance = db.Column(db.Numeric(14, 2), nullable=True)
    dearness_allowance = db.Column(db.Numeric(14, 2), nullable=True)
    perquisites = db.Column(db.Numeric(14, 2), nullable=True)
    others = db.Column(db.Numeric(14, 2), nullable=True)
    bonus = db.Column(db.Numeric(14, 2), nullable=True)
    variable_pay = db.Column(db.Numeric(14, 2), nullable=True)
    taxes = db.Column(db.Numeric(14, 2), nullable=True)
    salary_gross = db.Column(db.Numeric(14, 2), nullable=True)
    salary_total = db.Column(db.Numeric(14, 2), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @property
    def period_type(self):
        """'Monthly' / 'Weekly' from the payroll type prefix, None when unset."""
        pt = self.payroll_type or ""
        if pt.startswith("Monthly"):
            return "Monthly"
        if pt.startswith("Weekly"):
            return "Weekly"
        return None

    @property
    def weekly_off_paid(self) -> bool:
        return (self.payroll_type or "").endswith("_With_Sunday_Holiday")
