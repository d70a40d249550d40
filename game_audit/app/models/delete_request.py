from datetime import datetime
from app import db

DELETE_REQUEST_STATUSES = ("pending", "approved", "rejected")


class DeleteRequest(db.Model):
    __tablename__ = "delete_requests"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    # Snapshot of the target so decided requests stay readable after deletion.
    user_name = db.Column(db.String(150))
    user_email = db.Column(db.String(120))
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)
    requested_by = db.Column(db.String(150))
    requested_by_role = db.Column(db.String(32))
    status = db.Column(db.String(20), default="pending", nullable=False)
    requested_at = db.Column(db.DateTime, default=datetime.utcnow)
    decided_by = db.Column(db.String(150))
    decided_at = db.Column(db.DateTime)

    user = db.relationship("User", foreign_keys=[user_id])

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name or "-",
            "user_email": self.user_email or "-",
            "location_id": self.location_id,
            "requested_by": self.requested_by or "-",
            "requested_by_role": self.requested_by_role or "",
            "status": self.status,
            "requested_at": self.requested_at.isoformat() if self.requested_at else None,
            "decided_by": self.decided_by or "",
        }
