import bcrypt
from datetime import datetime
from flask_login import UserMixin
from app import db


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(32), nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)
    phone = db.Column(db.String(20))
    department = db.Column(db.String(100))
    active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    location = db.relationship("Location", backref="users")

    def set_password(self, password):
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    @property
    def status(self) -> str:
        return "Active" if self.active else "Inactive"

    @property
    def agent_name(self) -> str:
        """Name printed on silver slips."""
        if self.role == "SuperAdmin":
            return "Super Admin"
        return (self.email or "").split("@")[0]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name or "",
            "email": self.email or "",
            "role": self.role or "",
            "location_id": self.location_id,
            "location_name": self.location.name if self.location else "",
            "phone": self.phone or "",
            "department": self.department or "",
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
