# -*- coding: utf-8 -*-
"""
Agent silver slips: numbering, machine checks, delete rights and totals.
"""

from dataclasses import dataclass

from flask_babel import gettext as _

from app import db
from app.models.machine import Machine
from app.models.silver import AgentSilverSlip, SLIP_PREFIXES
from app.permissions import Role


class SlipValidationError(Exception):
    pass


def next_slip_number(slip_category, location_id, day):
    """Return ``(slip_no, serial)``, e.g. ``("AS-20240615-004", 4)``."""
    prefix = SLIP_PREFIXES[slip_category]
    last = (
        db.session.query(db.func.max(AgentSilverSlip.serial))
        .filter(AgentSilverSlip.slip_category == slip_category)
        .filter(AgentSilverSlip.location_id == location_id)
        .filter(AgentSilverSlip.slip_date == day)
        .scalar()
    )
    serial = (last or 0) + 1
    return f"{prefix}-{day.strftime('%Y%m%d')}-{serial:03d}", serial


def validate_slip_machine(machine_no, location_id):
    """The machine of a regular slip must exist, sit at the location and be operational."""
    machine = db.session.get(Machine, machine_no)
    if machine is None:
        raise SlipValidationError(_("Machine %(machine)s not found.", machine=machine_no))
    if machine.location_id != location_id:
        raise SlipValidationError(_("Machine %(machine)s belongs to another location.", machine=machine_no))
    if not machine.is_operational:
        raise SlipValidationError(_("Machine %(machine)s is not active (%(status)s).",
                                    machine=machine_no, status=machine.health_status))
    return machine


def can_delete_slip(user, slip) -> bool:
    role = Role.parse(getattr(user, "role", None))
    if role is Role.SUPER_ADMIN:
        return True
    if role is Role.LOCATION_ADMIN:
        return slip.location_id == user.location_id
    return False


@dataclass
class SlipSummary:
    total_slips: int = 0
    total_amount: float = 0.0
    total_bonus: float = 0.0

    @property
    def grand_total(self) -> float:
        return self.total_amount + self.total_bonus

    def to_dict(self):
        return {
            "total_slips": self.total_slips,
            "total_amount": self.total_amount,
            "total_bonus": self.total_bonus,
            "grand_total": self.grand_total,
        }


def summarize_slips(slips) -> SlipSummary:
    summary = SlipSummary()
    for slip in slips:
        summary.total_slips += 1
        if slip.is_bonus:
            summary.total_bonus += float(slip.bonus_amount or 0)
        else:
            summary.total_amount += float(slip.amount or 0)
    return summary
