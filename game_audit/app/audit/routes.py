# -*- coding: utf-8 -*-
"""
Audit blueprint: daily meter readings per machine.

Audit users may only record today's or yesterday's readings; managers can
look but not write.
"""

from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.audit.forms import AuditEntryForm
from app.audit.meters import previous_meters
from app.models.audit import AuditEntry
from app.permissions import (
    Module,
    apply_module_permissions,
    can_edit,
    effective_location_id,
    get_policy,
    is_super_admin,
    parse_selected_date,
    require_edit,
    require_view,
)
from app.utils.http import first_form_error, json_or_redirect, parse_int

audit_bp = Blueprint("audit", __name__)


def _selected_date(source):
    return parse_selected_date(source.get("date")) or get_policy().clock.today()


def _entries_for(day, location_id):
    return (
        AuditEntry.query
        .filter(AuditEntry.entry_date == day)
        .filter(AuditEntry.location_id == location_id)
        .order_by(AuditEntry.machine_no.asc())
        .all()
    )


@audit_bp.route("/audit")
@login_required
def index():
    require_view(Module.AUDIT)
    day = _selected_date(request.args)
    location_id = effective_location_id(current_user, parse_int("location_id", request.args))
    form = AuditEntryForm(entry_date=day)
    apply_module_permissions(current_user.role, Module.AUDIT, form, day)
    return render_template(
        "audit/index.html",
        form=form,
        entries=_entries_for(day, location_id),
        selected_date=day,
        can_edit=can_edit(current_user.role, Module.AUDIT, day),
    )


@audit_bp.route("/audit/data")
@login_required
def data():
    day = _selected_date(request.args)
    location_id = effective_location_id(current_user, parse_int("location_id", request.args))
    entries = _entries_for(day, location_id)
    return jsonify(
        success=True,
        date=day.isoformat(),
        entries=[entry.to_dict() for entry in entries],
        can_edit=can_edit(current_user.role, Module.AUDIT, day),
    )


@audit_bp.route("/audit/previous")
@login_required
def previous():
    machine_no = (request.args.get("machine_no") or "").strip()
    day = parse_selected_date(request.args.get("date"))
    if not machine_no or day is None:
        return jsonify(success=False, message=_("Machine No and Date are required")), 400
    location_id = effective_location_id(current_user, parse_int("location_id", request.args))
    meters = previous_meters(machine_no, location_id, day)
    if meters is None:
        return jsonify(success=True, found=False, message=_("No previous audit found"))
    return jsonify(success=True, found=True, prev_in=meters[0], prev_out=meters[1],
                   message=_("Previous audit loaded"))


def _load_own_entry(entry_id):
    """Entry the session user may change, or an error response."""
    entry = db.session.get(AuditEntry, entry_id) if entry_id else None
    if entry is None:
        return None, json_or_redirect(False, _("Audit entry not found."), "danger", "audit.index", status=404)
    require_edit(Module.AUDIT, entry.entry_date)
    if not is_super_admin(current_user) and entry.location_id != current_user.location_id:
        current_app.logger.warning("User %s may not change audit %s", current_user.id, entry.id)
        return None, json_or_redirect(False, _("You can only edit entries of your location."),
                                      "danger", "audit.index", status=403)
    return entry, None


@audit_bp.route("/audit/save", methods=["POST"])
@login_required
def save():
    form = AuditEntryForm()
    if form.delete.data:
        return _delete_entry(parse_int("id"))
    if not form.validate():
        return json_or_redirect(False, first_form_error(form) or _("Machine No and Date are required"),
                                "danger", "audit.index")
    day = form.entry_date.data
    require_edit(Module.AUDIT, day)

    entry = None
    if form.id.data:
        entry, failure = _load_own_entry(parse_int("id"))
        if failure:
            return failure
        location_id = entry.location_id
    else:
        location_id = effective_location_id(current_user, parse_int("location_id"))

    machine_no = form.machine_no.data.strip()
    prev_in, prev_out = form.prev_in.data, form.prev_out.data
    if prev_in is None or prev_out is None:
        carried = previous_meters(machine_no, location_id, day) or (0.0, 0.0)
        prev_in = carried[0] if prev_in is None else prev_in
        prev_out = carried[1] if prev_out is None else prev_out

    if entry is None:
        entry = AuditEntry(location_id=location_id, user_id=current_user.id)
        db.session.add(entry)
    entry.machine_no = machine_no
    entry.entry_date = day
    entry.prev_in = prev_in
    entry.prev_out = prev_out
    entry.cur_in = form.cur_in.data or 0.0
    entry.cur_out = form.cur_out.data or 0.0
    entry.jackpot = form.jackpot.data or 0.0
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save audit for machine %s", machine_no)
        return json_or_redirect(False, _("Failed to save audit"), "danger", "audit.index", status=500)

    current_app.logger.info("Audit %s saved for machine %s on %s by user %s",
                            entry.id, machine_no, day, current_user.id)
    return json_or_redirect(True, _("Audit saved successfully"), "success", "audit.index", entry=entry.to_dict())


@audit_bp.route("/audit/<int:entry_id>/delete", methods=["POST"])
@login_required
def delete(entry_id):
    return _delete_entry(entry_id)


def _delete_entry(entry_id):
    entry, failure = _load_own_entry(entry_id)
    if failure:
        return failure
    try:
        db.session.delete(entry)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete audit %s", entry_id)
        return json_or_redirect(False, _("Failed to delete audit"), "danger", "audit.index", status=500)
    current_app.logger.info("Audit %s deleted by user %s", entry_id, current_user.id)
    return json_or_redirect(True, _("Audit deleted successfully"), "success", "audit.index")
