# -*- coding: utf-8 -*-
"""
Gaming locations (sites). Every user, machine and cash entry belongs to one.
"""

from datetime import datetime
from app import db


class Location(db.Model):
    __tablename__ = "locations"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(150), nullable=False)
    address = db.Column(db.String(255))
    city = db.Column(db.String(100))
    state = db.Column(db.String(100))
    country = db.Column(db.String(100))
    contact_person = db.Column(db.String(150))
    contact_phone = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name or "",
            "address": self.address or "",
            "city": self.city or "",
            "state": self.state or "",
            "country": self.country or "",
            "contact_person": self.contact_person or "",
            "contact_phone": self.contact_phone or "",
        }
