# -*- coding: utf-8 -*-
"""
Machines blueprint: machine register with vendor, location and health.
"""

from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.machines.forms import MachineForm
from app.models.location import Location
from app.models.machine import Machine, HEALTH_STATUSES
from app.models.vendor import Vendor
from app.permissions import Module, apply_module_permissions, can_edit, location_filter, require_edit, require_view
from app.utils.choices import location_choices, vendor_choices
from app.utils.http import first_form_error, json_or_redirect, parse_int

machines_bp = Blueprint("machines", __name__)


def _build_form():
    form = MachineForm()
    form.vendor_id.choices = vendor_choices()
    form.location_id.choices = location_choices(only_id=location_filter(current_user))
    return form


def _filtered_query(args):
    query = Machine.query
    search = (args.get("q") or "").strip()
    if search:
        like = f"%{search}%"
        query = query.filter(or_(Machine.machine_id.ilike(like), Machine.machine_name.ilike(like)))
    health = args.get("health")
    if health in HEALTH_STATUSES:
        query = query.filter(Machine.health_status == health)
    scoped_location = location_filter(current_user)
    requested_location = parse_int("location_id", args)
    if scoped_location is not None:
        query = query.filter(Machine.location_id == scoped_location)
    elif requested_location is not None:
        query = query.filter(Machine.location_id == requested_location)
    return query.order_by(Machine.machine_id.asc())


def _paginate(args):
    return _filtered_query(args).paginate(
        page=parse_int("page", args) or 1,
        per_page=current_app.config.get("PAGE_SIZE", 20),
        error_out=False,
    )


@machines_bp.route("/machines")
@login_required
def index():
    require_view(Module.MACHINES)
    form = _build_form()
    apply_module_permissions(current_user.role, Module.MACHINES, form)
    return render_template(
        "machines/index.html",
        form=form,
        page=_paginate(request.args),
        can_edit=can_edit(current_user.role, Module.MACHINES),
    )


@machines_bp.route("/machines/data")
@login_required
def data():
    page = _paginate(request.args)
    return jsonify(
        success=True,
        machines=[machine.to_dict() for machine in page.items],
        page=page.page,
        pages=page.pages,
        total=page.total,
    )


@machines_bp.route("/machines/save", methods=["POST"])
@login_required
def save():
    require_edit(Module.MACHINES)
    form = _build_form()
    if form.delete.data:
        return _delete_machine((form.machine_id.data or "").strip())
    if not form.validate():
        return json_or_redirect(False, first_form_error(form), "danger", "machines.index")

    vendor = None
    if form.vendor_id.data:
        vendor = db.session.get(Vendor, form.vendor_id.data)
        if vendor is None:
            return json_or_redirect(False, _("Unknown vendor."), "danger", "machines.index")

    location_id = form.location_id.data
    scoped_location = location_filter(current_user)
    if scoped_location is not None:
        if location_id not in (None, scoped_location):
            return json_or_redirect(False, _("You can only manage machines of your location."),
                                    "danger", "machines.index", status=403)
        location_id = scoped_location
    if location_id is not None and db.session.get(Location, location_id) is None:
        return json_or_redirect(False, _("Unknown location."), "danger", "machines.index")

    machine_id = form.machine_id.data.strip()
    machine = db.session.get(Machine, machine_id)
    if machine is not None and scoped_location is not None and machine.location_id != scoped_location:
        return json_or_redirect(False, _("You can only manage machines of your location."),
                                "danger", "machines.index", status=403)
    created = machine is None
    if created:
        machine = Machine(machine_id=machine_id)
        db.session.add(machine)
    machine.machine_name = form.machine_name.data.strip()
    machine.vendor_id = vendor.vendor_id if vendor else None
    machine.vendor_name = vendor.name if vendor else None
    machine.location_id = location_id
    machine.health_status = form.health_status.data
    machine.last_service_date = form.last_service_date.data
    machine.notes = (form.notes.data or "").strip() or None

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save machine %s", machine_id)
        return json_or_redirect(False, _("Unable to save machine."), "danger", "machines.index", status=500)

    current_app.logger.info("Machine %s %s by user %s", machine_id, "created" if created else "updated", current_user.id)
    message = _("Machine added.") if created else _("Machine updated.")
    return json_or_redirect(True, message, "success", "machines.index", machine=machine.to_dict())


@machines_bp.route("/machines/<machine_id>/delete", methods=["POST"])
@login_required
def delete(machine_id):
    require_edit(Module.MACHINES)
    return _delete_machine(machine_id)


def _delete_machine(machine_id):
    machine = db.session.get(Machine, machine_id)
    if machine is None:
        return json_or_redirect(False, _("Machine not found."), "danger", "machines.index", status=404)
    scoped_location = location_filter(current_user)
    if scoped_location is not None and machine.location_id != scoped_location:
        return json_or_redirect(False, _("You can only manage machines of your location."),
                                "danger", "machines.index", status=403)
    try:
        db.session.delete(machine)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return json_or_redirect(False, _("Machine is still referenced."), "danger", "machines.index", status=409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete machine %s", machine_id)
        return json_or_redirect(False, _("Unable to delete machine."), "danger", "machines.index", status=500)
    current_app.logger.info("Machine %s deleted by user %s", machine_id, current_user.id)
    return json_or_redirect(True, _("Machine deleted."), "success", "machines.index")
