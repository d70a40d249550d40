# -*- coding: utf-8 -*-
"""
Locations blueprint: the sites every other record belongs to.
"""

from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.locations.codes import generate_location_code
from app.locations.forms import LocationForm
from app.models.location import Location
from app.permissions import Module, apply_module_permissions, can_edit, require_edit, require_view
from app.utils.http import first_form_error, json_or_redirect, parse_int

locations_bp = Blueprint("locations", __name__)


def _search(query_text):
    query = Location.query
    if query_text:
        like = f"%{query_text}%"
        query = query.filter(or_(
            Location.code.ilike(like),
            Location.name.ilike(like),
            Location.city.ilike(like),
        ))
    return query.order_by(Location.name.asc()).all()


@locations_bp.route("/locations")
@login_required
def index():
    require_view(Module.LOCATIONS)
    form = LocationForm()
    apply_module_permissions(current_user.role, Module.LOCATIONS, form)
    locations = _search((request.args.get("q") or "").strip())
    return render_template(
        "locations/index.html",
        form=form,
        locations=locations,
        can_edit=can_edit(current_user.role, Module.LOCATIONS),
    )


@locations_bp.route("/locations/data")
@login_required
def data():
    locations = _search((request.args.get("q") or "").strip())
    return jsonify(success=True, locations=[loc.to_dict() for loc in locations])


@locations_bp.route("/locations/save", methods=["POST"])
@login_required
def save():
    require_edit(Module.LOCATIONS)
    form = LocationForm()
    if form.delete.data:
        return _delete_location(parse_int("id", request.form))
    if not form.validate():
        return json_or_redirect(False, first_form_error(form), "danger", "locations.index")

    location = None
    if form.id.data:
        location = db.session.get(Location, int(form.id.data)) if form.id.data.isdigit() else None
        if location is None:
            return json_or_redirect(False, _("Location not found."), "danger", "locations.index", status=404)
    else:
        location = Location()

    for attr in ("name", "address", "city", "state", "country", "contact_person", "contact_phone"):
        value = getattr(form, attr).data
        setattr(location, attr, value.strip() if value else None)

    code = (form.code.data or "").strip().upper()
    if code:
        location.code = code
    elif not location.code:
        location.code = generate_location_code(location.country, location.city)
    if location.id is None:
        db.session.add(location)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return json_or_redirect(False, _("Location code %(code)s already exists.", code=location.code),
                                "danger", "locations.index", status=409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save location")
        return json_or_redirect(False, _("Unable to save location."), "danger", "locations.index", status=500)

    current_app.logger.info("Location %s saved by user %s", location.code, current_user.id)
    return json_or_redirect(True, _("Location saved."), "success", "locations.index", location=location.to_dict())


@locations_bp.route("/locations/<int:location_id>/delete", methods=["POST"])
@login_required
def delete(location_id):
    require_edit(Module.LOCATIONS)
    return _delete_location(location_id)


def _delete_location(location_id):
    location = db.session.get(Location, location_id) if location_id else None
    if location is None:
        return json_or_redirect(False, _("Location not found."), "danger", "locations.index", status=404)
    if location.users or location.machines:
        return json_or_redirect(False, _("Location is still referenced by users or machines."),
                                "danger", "locations.index", status=409)
    try:
        db.session.delete(location)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return json_or_redirect(False, _("Location is still referenced by users or machines."),
                                "danger", "locations.index", status=409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete location %s", location_id)
        return json_or_redirect(False, _("Unable to delete location."), "danger", "locations.index", status=500)
    current_app.logger.info("Location %s deleted by user %s", location_id, current_user.id)
    return json_or_redirect(True, _("Location deleted."), "success", "locations.index")
