from datetime import datetime

from portal_api.extensions import db


class Department(db.Model):
    """
    Organisational unit. Tests configured as `manual_departments`
    reference departments by *name*.
    """

    __tablename__ = "departments"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
