from datetime import datetime
from portal_api.extensions import db

class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)

    code  = db.Column(db.String(32), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    first_name = db.Column(db.String(80), nullable=False)
    last_name  = db.Column(db.String(80), nullable=True)

    is_active     = db.Column(db.Boolean, default=True, nullable=False)
    test_eligible = db.Column(db.Boolean, default=False, nullable=False)  # may receive daily tests

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_emp_dept_id", "department_id"),
        db.Index("ix_emp_test_eligible", "is_active", "test_eligible"),
    )

    department = db.relationship("Department", lazy="joined")

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    @property
    def department_name(self):
        return self.department.name if self.department else None
