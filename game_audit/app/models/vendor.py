from datetime import datetime
from app import db

VENDOR_STATUSES = ("Active", "Inactive")


class Vendor(db.Model):
    __tablename__ = "vendors"

    vendor_id = db.Column(db.String(50), primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    contact_person = db.Column(db.String(150))
    phone = db.Column(db.String(12))
    address = db.Column(db.String(255))
    status = db.Column(db.String(20), default="Active", nullable=False)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "vendor_id": self.vendor_id,
            "name": self.name or "",
            "contact_person": self.contact_person or "",
            "phone": self.phone or "",
            "address": self.address or "",
            "status": self.status or "",
            "notes": self.notes or "",
        }
