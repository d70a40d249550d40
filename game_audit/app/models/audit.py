from datetime import datetime
from app import db


class AuditEntry(db.Model):
    """Daily meter reading for one machine."""

    __tablename__ = "audit_entries"

    id = db.Column(db.Integer, primary_key=True)
    machine_no = db.Column(db.String(50), nullable=False, index=True)
    entry_date = db.Column(db.Date, nullable=False, index=True)
    prev_in = db.Column(db.Float, default=0, nullable=False)
    prev_out = db.Column(db.Float, default=0, nullable=False)
    cur_in = db.Column(db.Float, default=0, nullable=False)
    cur_out = db.Column(db.Float, default=0, nullable=False)
    jackpot = db.Column(db.Float, default=0, nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "machine_no": self.machine_no,
            "date": self.entry_date.isoformat() if self.entry_date else None,
            "prev_in": self.prev_in,
            "prev_out": self.prev_out,
            "cur_in": self.cur_in,
            "cur_out": self.cur_out,
            "jackpot": self.jackpot,
            "location_id": self.location_id,
            "user_id": self.user_id,
        }
