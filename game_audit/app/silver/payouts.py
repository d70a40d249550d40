"""Paying out agent slips at the silver counter."""

from datetime import datetime

from flask_babel import gettext as _

from app import db
from app.models.silver import AgentSilverSlip, SilverEntry


class PayoutError(Exception):
    def __init__(self, message, status=400):
        super().__init__(message)
        self.message = message
        self.status = status


def process_silver_scan(slip_no, paid_by, location_id=None):
    """Record the payout of ``slip_no`` and mark the slip paid.

    The caller commits. ``location_id`` restricts which slips may be paid.
    """
    slip_no = (slip_no or "").strip()
    slip = AgentSilverSlip.query.filter_by(slip_no=slip_no).first() if slip_no else None
    if slip is None:
        raise PayoutError(_("Invalid slip code."), status=404)
    if location_id is not None and slip.location_id != location_id:
        raise PayoutError(_("Slip belongs to another location."), status=403)
    if slip.is_paid:
        raise PayoutError(_("This ticket has already been paid."), status=409)

    now = datetime.utcnow()
    entry = SilverEntry(
        slip_no=slip.slip_no,
        slip_date=slip.slip_date,
        agent_name=slip.agent_name,
        machine_no=slip.machine_no,
        amount=slip.payable_amount,
        location_id=slip.location_id,
        confirmed_by="Silver",
        paid_by=paid_by,
        paid_at=now,
    )
    slip.is_paid = True
    slip.confirmed_by = "Silver"
    slip.paid_by = paid_by
    slip.paid_at = now
    db.session.add(entry)
    return entry


def total_paid(entries) -> float:
    return sum(float(entry.amount or 0) for entry in entries)
