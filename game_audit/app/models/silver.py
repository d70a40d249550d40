# -*- coding: utf-8 -*-
"""
Silver cash workflow.

Agents print slips (``AgentSilverSlip``) for machine payouts and bonuses,
the silver counter pays them out (``SilverEntry``) and silver purchases are
approved by a second department (``SilverPurchase``).
"""

from datetime import datetime
from app import db

SLIP_CATEGORIES = ("regular", "bonus")
SLIP_PREFIXES = {"regular": "AS", "bonus": "BS"}
BONUS_TYPES = ("Raffle", "Birthday Gift", "Festival Bonus", "Promo Bonus")
BONUS_MACHINE_NO = "BONUS"
PURCHASE_STATUSES = ("Pending", "Approved")


class AgentSilverSlip(db.Model):
    __tablename__ = "agent_silver_slips"

    id = db.Column(db.Integer, primary_key=True)
    slip_no = db.Column(db.String(32), unique=True, nullable=False)
    slip_category = db.Column(db.String(10), default="regular", nullable=False)
    slip_date = db.Column(db.Date, nullable=False, index=True)
    serial = db.Column(db.Integer, nullable=False)
    agent_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    agent_name = db.Column(db.String(150))
    machine_no = db.Column(db.String(50), nullable=False)
    amount = db.Column(db.Float, default=0, nullable=False)
    bonus_type = db.Column(db.String(50))
    bonus_amount = db.Column(db.Float, default=0, nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)
    is_paid = db.Column(db.Boolean, default=False, nullable=False)
    confirmed_by = db.Column(db.String(50))
    paid_by = db.Column(db.String(150))
    paid_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_bonus(self) -> bool:
        return self.slip_category == "bonus"

    @property
    def payable_amount(self) -> float:
        return (self.bonus_amount if self.is_bonus else self.amount) or 0.0

    def to_dict(self):
        return {
            "id": self.id,
            "slip_no": self.slip_no,
            "slip_category": self.slip_category,
            "slip_date": self.slip_date.isoformat() if self.slip_date else None,
            "agent_name": self.agent_name or "",
            "machine_no": self.machine_no if not self.is_bonus else "-",
            "amount": self.amount or 0.0,
            "bonus_type": self.bonus_type or "",
            "bonus_amount": self.bonus_amount or 0.0,
            "location_id": self.location_id,
            "status": "Paid" if self.is_paid else "Unpaid",
            "paid_by": self.paid_by or "",
        }


class SilverEntry(db.Model):
    """A paid-out slip, as recorded at the silver counter."""

    __tablename__ = "silver_entries"

    id = db.Column(db.Integer, primary_key=True)
    slip_no = db.Column(db.String(32), unique=True, nullable=False)
    slip_date = db.Column(db.Date)
    agent_name = db.Column(db.String(150))
    machine_no = db.Column(db.String(50))
    amount = db.Column(db.Float, default=0, nullable=False)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)
    confirmed_by = db.Column(db.String(50), default="Silver")
    paid_by = db.Column(db.String(150))
    paid_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "slip_no": self.slip_no,
            "slip_date": self.slip_date.isoformat() if self.slip_date else None,
            "agent_name": self.agent_name or "",
            "machine_no": self.machine_no or "",
            "amount": self.amount or 0.0,
            "confirmed_by": self.confirmed_by or "",
            "paid_by": self.paid_by or "",
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
        }


class SilverPurchase(db.Model):
    __tablename__ = "silver_purchases"

    id = db.Column(db.Integer, primary_key=True)
    purchase_id = db.Column(db.String(40), unique=True, nullable=False)
    date_time = db.Column(db.DateTime, nullable=False)
    amount = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(20), default="Pending", nullable=False)
    entered_by = db.Column(db.String(32), nullable=False)
    entered_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    approved_by = db.Column(db.String(32))
    approved_at = db.Column(db.DateTime)
    location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "purchase_id": self.purchase_id,
            "date_time": self.date_time.isoformat() if self.date_time else None,
            "amount": self.amount,
            "status": self.status,
            "entered_by": self.entered_by,
            "approved_by": self.approved_by or "-",
        }
