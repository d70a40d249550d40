from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models.msp import MspEntry
from app.msp.forms import MspEntryForm
from app.msp.grid import build_msp_grid
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
from app.utils.choices import location_choices
from app.utils.http import first_form_error, json_or_redirect, parse_int

msp_bp = Blueprint("msp", __name__)


def _entries_for(day, location_id):
    return (
        MspEntry.query
        .filter(MspEntry.entry_date == day)
        .filter(MspEntry.location_id == location_id)
        .order_by(MspEntry.created_at.asc(), MspEntry.id.asc())
        .all()
    )


def _location_choices():
    only_id = None if is_super_admin(current_user) else current_user.location_id
    return location_choices(only_id=only_id, blank=False)


@msp_bp.route("/msp")
@login_required
def index():
    require_view(Module.MSP)
    day = parse_selected_date(request.args.get("date")) or get_policy().clock.today()
    location_id = effective_location_id(current_user, parse_int("location_id", request.args))
    form = MspEntryForm(entry_date=day, location_id=location_id)
    form.location_id.choices = _location_choices()
    apply_module_permissions(current_user.role, Module.MSP, form, day)
    return render_template(
        "msp/index.html",
        form=form,
        grid=build_msp_grid(_entries_for(day, location_id)),
        selected_date=day,
        can_edit=can_edit(current_user.role, Module.MSP, day),
    )


@msp_bp.route("/msp/data")
@login_required
def data():
    day = parse_selected_date(request.args.get("date")) or get_policy().clock.today()
    location_id = effective_location_id(current_user, parse_int("location_id", request.args))
    machine_no = (request.args.get("machine_no") or "").strip()
    entries = _entries_for(day, location_id)
    payload = {
        "success": True,
        "date": day.isoformat(),
        "location_id": location_id,
        "grid": build_msp_grid(entries).to_dict(),
        "can_edit": can_edit(current_user.role, Module.MSP, day),
    }
    if machine_no:
        payload["entries"] = [e.to_dict() for e in entries if e.machine_no == machine_no]
    return jsonify(payload)


@msp_bp.route("/msp/save", methods=["POST"])
@login_required
def save():
    form = MspEntryForm()
    form.location_id.choices = _location_choices()
    if form.delete.data:
        return _delete_entry(parse_int("id", request.form))
    if not form.validate():
        return json_or_redirect(False, first_form_error(form), "danger", "msp.index")
    day = form.entry_date.data
    require_edit(Module.MSP, day)
    location_id = effective_location_id(current_user, form.location_id.data)

    entry = None
    if form.id.data:
        entry = db.session.get(MspEntry, int(form.id.data)) if form.id.data.isdigit() else None
        if entry is None:
            return json_or_redirect(False, _("MSP entry not found."), "danger", "msp.index", status=404)
        require_edit(Module.MSP, entry.entry_date)
        if not is_super_admin(current_user) and entry.location_id != current_user.location_id:
            return json_or_redirect(False, _("You can only edit entries of your location."),
                                    "danger", "msp.index", status=403)
    else:
        entry = MspEntry(created_by=current_user.id)
        db.session.add(entry)

    entry.entry_date = day
    entry.location_id = location_id
    entry.machine_no = form.machine_no.data.strip()
    entry.entry_type = form.entry_type.data
    entry.amount = form.amount.data
    entry.remarks = (form.remarks.data or "").strip() or None

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save MSP entry for machine %s", entry.machine_no)
        return json_or_redirect(False, _("Unable to save MSP entry."), "danger", "msp.index", status=500)

    current_app.logger.info("MSP entry %s saved by user %s", entry.id, current_user.id)
    return json_or_redirect(True, _("MSP entry saved."), "success", "msp.index", entry=entry.to_dict())


@msp_bp.route("/msp/<int:entry_id>/delete", methods=["POST"])
@login_required
def delete(entry_id):
    return _delete_entry(entry_id)


def _delete_entry(entry_id):
    entry = db.session.get(MspEntry, entry_id) if entry_id else None
    if entry is None:
        return json_or_redirect(False, _("MSP entry not found."), "danger", "msp.index", status=404)
    require_edit(Module.MSP, entry.entry_date)
    if not is_super_admin(current_user) and entry.location_id != current_user.location_id:
        return json_or_redirect(False, _("You can only edit entries of your location."),
                                "danger", "msp.index", status=403)
    try:
        db.session.delete(entry)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete MSP entry %s", entry_id)
        return json_or_redirect(False, _("Unable to delete MSP entry."), "danger", "msp.index", status=500)
    current_app.logger.info("MSP entry %s deleted by user %s", entry_id, current_user.id)
    return json_or_redirect(True, _("MSP entry deleted."), "success", "msp.index")
