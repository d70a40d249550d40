# -*- coding: utf-8 -*-
"""
Gaming machines installed at a location and supplied by a vendor.
"""

from datetime import datetime
from app import db

HEALTH_STATUSES = ("Good", "Warning", "Critical")
# Machines that may still take agent slips.
OPERATIONAL_STATUSES = ("Good", "Warning")


class Machine(db.Model):
    __tablename__ = "machines"

    machine_id = db.Column(db.String(50), primary_key=True)
    machine_name = db.Column(db.String(150), nullable=False)
    vendor_id = db.Column(db.String(50), db.ForeignKey("vendors.vendor_id"), nullable=True)
    vendor_name = db.Column(db.String(150))
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)
    health_status = db.Column(db.String(20), default="Good", nullable=False)
    last_service_date = db.Column(db.Date)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    location = db.relationship("Location", backref="machines")

    @property
    def qr_payload(self) -> str:
        return f"MACHINE:{self.machine_id}"

    @property
    def is_operational(self) -> bool:
        return self.health_status in OPERATIONAL_STATUSES

    def to_dict(self):
        return {
            "machine_id": self.machine_id,
            "machine_name": self.machine_name or "",
            "vendor_id": self.vendor_id or "",
            "vendor_name": self.vendor_name or "",
            "location_id": self.location_id,
            "location_name": self.location.name if self.location else "",
            "health_status": self.health_status or "",
            "last_service_date": self.last_service_date.isoformat() if self.last_service_date else None,
            "notes": self.notes or "",
            "qr_payload": self.qr_payload,
        }
