from datetime import datetime
from app import db

MSP_ENTRY_TYPES = ("MSP", "EOD")


class MspEntry(db.Model):
    __tablename__ = "msp_entries"

    id = db.Column(db.Integer, primary_key=True)
    entry_date = db.Column(db.Date, nullable=False, index=True)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)
    machine_no = db.Column(db.String(50), nullable=False)
    entry_type = db.Column(db.String(10), default="MSP", nullable=False)
    amount = db.Column(db.Float, default=0, nullable=False)
    remarks = db.Column(db.String(255))
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "entry_date": self.entry_date.isoformat() if self.entry_date else None,
            "location_id": self.location_id,
            "machine_no": self.machine_no,
            "type": self.entry_type,
            "amount": self.amount,
            "remarks": self.remarks or "",
        }
