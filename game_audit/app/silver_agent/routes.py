# -*- coding: utf-8 -*-
"""
Agent silver blueprint: agents issue payout and bonus slips that the silver
counter later pays out.
"""

from datetime import datetime

from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.models.silver import AgentSilverSlip, BONUS_MACHINE_NO, BONUS_TYPES, SLIP_CATEGORIES
from app.permissions import (
    Module,
    apply_module_permissions,
    can_edit,
    effective_location_id,
    get_policy,
    is_super_admin,
    location_filter,
    parse_selected_date,
    require_edit,
    require_view,
)
from app.silver_agent.forms import AgentSlipForm
from app.silver_agent.slips import (
    SlipValidationError,
    can_delete_slip,
    next_slip_number,
    summarize_slips,
    validate_slip_machine,
)
from app.utils.choices import location_choices
from app.utils.http import first_form_error, json_or_redirect, parse_int

silver_agent_bp = Blueprint("silver_agent", __name__)


def _build_form(**kwargs):
    form = AgentSlipForm(**kwargs)
    only_id = None if is_super_admin(current_user) else current_user.location_id
    form.location_id.choices = location_choices(only_id=only_id, blank=False)
    return form


def _slips_for(day, args):
    query = AgentSilverSlip.query.filter(AgentSilverSlip.slip_date == day)
    scoped_location = location_filter(current_user)
    requested_location = parse_int("location_id", args)
    if scoped_location is not None:
        query = query.filter(AgentSilverSlip.location_id == scoped_location)
    elif requested_location is not None:
        query = query.filter(AgentSilverSlip.location_id == requested_location)
    category = args.get("category")
    if category in SLIP_CATEGORIES:
        query = query.filter(AgentSilverSlip.slip_category == category)
    return query.order_by(AgentSilverSlip.slip_no.asc()).all()


@silver_agent_bp.route("/silver-agent")
@login_required
def index():
    require_view(Module.SILVER_AGENT)
    day = parse_selected_date(request.args.get("date")) or get_policy().clock.today()
    form = _build_form(location_id=current_user.location_id)
    apply_module_permissions(current_user.role, Module.SILVER_AGENT, form, day)
    slips = _slips_for(day, request.args)
    return render_template(
        "silver_agent/index.html",
        form=form,
        slips=slips,
        summary=summarize_slips(slips),
        selected_date=day,
        can_edit=can_edit(current_user.role, Module.SILVER_AGENT, day),
    )


@silver_agent_bp.route("/silver-agent/data")
@login_required
def data():
    day = parse_selected_date(request.args.get("date")) or get_policy().clock.today()
    slips = _slips_for(day, request.args)
    return jsonify(
        success=True,
        date=day.isoformat(),
        slips=[slip.to_dict() for slip in slips],
        summary=summarize_slips(slips).to_dict(),
    )


@silver_agent_bp.route("/silver-agent/slips/<slip_no>")
@login_required
def show(slip_no):
    slip = AgentSilverSlip.query.filter_by(slip_no=slip_no).first()
    if slip is None:
        return jsonify(success=False, message=_("Slip not found.")), 404
    return jsonify(success=True, slip=slip.to_dict(), can_delete=can_delete_slip(current_user, slip))


@silver_agent_bp.route("/silver-agent/save", methods=["POST"])
@login_required
def save():
    form = _build_form()
    if form.delete.data:
        return _delete_slip((form.slip_no.data or "").strip())
    if not form.validate():
        return json_or_redirect(False, first_form_error(form), "danger", "silver_agent.index")

    slip = None
    if form.slip_no.data:
        slip = AgentSilverSlip.query.filter_by(slip_no=form.slip_no.data).first()
        if slip is None:
            return json_or_redirect(False, _("Slip not found."), "danger", "silver_agent.index", status=404)
        if not is_super_admin(current_user) and slip.location_id != current_user.location_id:
            current_app.logger.warning("User %s may not edit slip %s", current_user.id, slip.slip_no)
            return json_or_redirect(False, _("You can only edit slips of your location."), "danger",
                                    "silver_agent.index", status=403)
        if slip.is_paid:
            return json_or_redirect(False, _("Paid slips cannot be changed."), "danger",
                                    "silver_agent.index", status=409)
        day = slip.slip_date
        category = slip.slip_category
        location_id = slip.location_id
    else:
        day = get_policy().clock.today()
        category = form.slip_category.data
        location_id = effective_location_id(current_user, form.location_id.data)
    require_edit(Module.SILVER_AGENT, day)

    if category == "regular":
        machine_no = (form.machine_no.data or "").strip()
        amount = form.amount.data or 0.0
        if not machine_no or amount <= 0:
            return json_or_redirect(False, _("Machine No and a positive amount are required."),
                                    "danger", "silver_agent.index")
        try:
            validate_slip_machine(machine_no, location_id)
        except SlipValidationError as exc:
            return json_or_redirect(False, str(exc), "danger", "silver_agent.index")
        bonus_type, bonus_amount = None, 0.0
    else:
        bonus_type = form.bonus_type.data
        bonus_amount = form.bonus_amount.data or 0.0
        if bonus_type not in BONUS_TYPES or bonus_amount <= 0:
            return json_or_redirect(False, _("Bonus type and a positive bonus amount are required."),
                                    "danger", "silver_agent.index")
        machine_no, amount = BONUS_MACHINE_NO, 0.0

    if slip is None:
        slip_no, serial = next_slip_number(category, location_id, day)
        slip = AgentSilverSlip(
            slip_no=slip_no,
            serial=serial,
            slip_category=category,
            slip_date=day,
            location_id=location_id,
            agent_id=current_user.id,
            agent_name=current_user.agent_name,
            created_at=datetime.utcnow(),
        )
        db.session.add(slip)
    slip.machine_no = machine_no
    slip.amount = amount
    slip.bonus_type = bonus_type
    slip.bonus_amount = bonus_amount

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.warning("Slip number clash while saving slip for location %s", location_id)
        return json_or_redirect(False, _("Slip number already used, please save again."),
                                "danger", "silver_agent.index", status=409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save agent slip")
        return json_or_redirect(False, _("Unable to save slip."), "danger", "silver_agent.index", status=500)

    current_app.logger.info("Slip %s saved by user %s", slip.slip_no, current_user.id)
    return json_or_redirect(True, _("Slip %(slip)s saved.", slip=slip.slip_no), "success",
                            "silver_agent.index", slip=slip.to_dict())


@silver_agent_bp.route("/silver-agent/slips/<slip_no>/delete", methods=["POST"])
@login_required
def delete(slip_no):
    return _delete_slip(slip_no)


def _delete_slip(slip_no):
    slip = AgentSilverSlip.query.filter_by(slip_no=slip_no).first() if slip_no else None
    if slip is None:
        return json_or_redirect(False, _("Slip not found."), "danger", "silver_agent.index", status=404)
    if not can_delete_slip(current_user, slip):
        current_app.logger.warning("User %s may not delete slip %s", current_user.id, slip_no)
        return json_or_redirect(False, _("You are not allowed to delete this slip"), "danger",
                                "silver_agent.index", status=403)
    try:
        db.session.delete(slip)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete slip %s", slip_no)
        return json_or_redirect(False, _("Error deleting slip"), "danger", "silver_agent.index", status=500)
    current_app.logger.info("Slip %s deleted by user %s", slip_no, current_user.id)
    return json_or_redirect(True, _("Slip deleted successfully"), "success", "silver_agent.index")
