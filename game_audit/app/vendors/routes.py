from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.models.vendor import Vendor, VENDOR_STATUSES
from app.permissions import Module, apply_module_permissions, can_edit, require_edit, require_view
from app.utils.http import first_form_error, json_or_redirect, parse_int
from app.vendors.forms import VendorForm

vendors_bp = Blueprint("vendors", __name__)


def _filtered_query(args):
    query = Vendor.query
    search = (args.get("q") or "").strip()
    if search:
        like = f"%{search}%"
        query = query.filter(or_(Vendor.name.ilike(like), Vendor.vendor_id.ilike(like)))
    status = args.get("status")
    if status in VENDOR_STATUSES:
        query = query.filter(Vendor.status == status)
    return query.order_by(Vendor.name.asc())


@vendors_bp.route("/vendors")
@login_required
def index():
    require_view(Module.VENDORS)
    form = VendorForm()
    apply_module_permissions(current_user.role, Module.VENDORS, form)
    page = _filtered_query(request.args).paginate(
        page=parse_int("page", request.args) or 1,
        per_page=current_app.config.get("PAGE_SIZE", 20),
        error_out=False,
    )
    return render_template(
        "vendors/index.html",
        form=form,
        page=page,
        can_edit=can_edit(current_user.role, Module.VENDORS),
    )


@vendors_bp.route("/vendors/data")
@login_required
def data():
    page = _filtered_query(request.args).paginate(
        page=parse_int("page", request.args) or 1,
        per_page=current_app.config.get("PAGE_SIZE", 20),
        error_out=False,
    )
    return jsonify(
        success=True,
        vendors=[vendor.to_dict() for vendor in page.items],
        page=page.page,
        pages=page.pages,
        total=page.total,
    )


@vendors_bp.route("/vendors/save", methods=["POST"])
@login_required
def save():
    require_edit(Module.VENDORS)
    form = VendorForm()
    if form.delete.data:
        return _delete_vendor((form.vendor_id.data or "").strip())
    if not form.validate():
        return json_or_redirect(False, first_form_error(form), "danger", "vendors.index")

    vendor_id = form.vendor_id.data.strip()
    vendor = db.session.get(Vendor, vendor_id)
    created = vendor is None
    if created:
        vendor = Vendor(vendor_id=vendor_id)
        db.session.add(vendor)
    vendor.name = form.name.data.strip()
    vendor.contact_person = (form.contact_person.data or "").strip() or None
    vendor.phone = form.phone.data
    vendor.address = (form.address.data or "").strip() or None
    vendor.status = form.status.data
    vendor.notes = (form.notes.data or "").strip() or None

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save vendor %s", vendor_id)
        return json_or_redirect(False, _("Unable to save vendor."), "danger", "vendors.index", status=500)

    current_app.logger.info("Vendor %s %s by user %s", vendor_id, "created" if created else "updated", current_user.id)
    message = _("Vendor added.") if created else _("Vendor updated.")
    return json_or_redirect(True, message, "success", "vendors.index", vendor=vendor.to_dict())


@vendors_bp.route("/vendors/<vendor_id>/delete", methods=["POST"])
@login_required
def delete(vendor_id):
    require_edit(Module.VENDORS)
    return _delete_vendor(vendor_id)


def _delete_vendor(vendor_id):
    vendor = db.session.get(Vendor, vendor_id)
    if vendor is None:
        return json_or_redirect(False, _("Vendor not found."), "danger", "vendors.index", status=404)
    try:
        db.session.delete(vendor)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return json_or_redirect(False, _("Vendor still has machines assigned."), "danger", "vendors.index", status=409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete vendor %s", vendor_id)
        return json_or_redirect(False, _("Unable to delete vendor."), "danger", "vendors.index", status=500)
    current_app.logger.info("Vendor %s deleted by user %s", vendor_id, current_user.id)
    return json_or_redirect(True, _("Vendor deleted."), "success", "vendors.index")
