from datetime import datetime
from hrms_payroll.extensions import db

# Active, Terminated, PartTime, Contractual, Suspended, Probation, Resigned, Promoted, Inactive
PAYABLE_STATUSES = ("Active", "PartTime", "Contractual", "Probation")

class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(db.Integer, db.ForeignKey("posts.id", ondelete="RESTRICT"), nullable=True, index=True)

    code = db.Column(db.String(32), unique=True, nullable=False)   # business employee id
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=True)
    email = db.Column(db.String(255), unique=True, nullable=True)

    status = db.Column(db.String(16), default="Active", nullable=False)
    date_of_joining = db.Column(db.Date, nullable=True)
    last_working_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    post = db.relationship("Post", lazy="joined")

    @property
    def full_name(self):
        return " ".join(p for p in (self.first_name, self.last_name) if p)
