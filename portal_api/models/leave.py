from datetime import datetime
from portal_api.extensions import db

LEAVE_STATUSES = ("pending", "approved", "rejected", "cancelled")

class LeaveRequest(db.Model):
    __tablename__ = "leave_requests"
    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    reason = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default="pending")  # pending|approved|rejected|cancelled

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_leave_emp_status_range", "employee_id", "status", "start_date", "end_date"),
    )

    employee = db.relationship("Employee", backref="leave_requests")
