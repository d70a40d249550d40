# -*- coding: utf-8 -*-
"""
Silver purchases: one department enters a purchase, another approves it.
"""

import secrets
from datetime import datetime

from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models.silver import PURCHASE_STATUSES, SilverPurchase
from app.permissions import (
    Module,
    apply_module_permissions,
    can_edit,
    get_policy,
    location_filter,
    require_edit,
    require_view,
)
from app.silver_purchase.forms import SilverPurchaseForm
from app.utils.http import first_form_error, json_or_redirect

silver_purchase_bp = Blueprint("silver_purchase", __name__)


def _purchases():
    query = SilverPurchase.query
    status = request.args.get("status")
    if status in PURCHASE_STATUSES:
        query = query.filter(SilverPurchase.status == status)
    scoped_location = location_filter(current_user)
    if scoped_location is not None:
        query = query.filter(SilverPurchase.location_id == scoped_location)
    return query.order_by(SilverPurchase.date_time.desc()).all()


def total_approved(purchases) -> float:
    return sum(float(p.amount or 0) for p in purchases if p.status == "Approved")


def can_approve(user, purchase) -> bool:
    """Pending purchases may be approved by a role other than the one that entered them."""
    if purchase.status != "Pending" or purchase.entered_by == user.role:
        return False
    return can_edit(user.role, Module.SILVER_PURCHASE, purchase.date_time)


@silver_purchase_bp.route("/silver-purchase")
@login_required
def index():
    require_view(Module.SILVER_PURCHASE)
    today = get_policy().clock.today()
    form = SilverPurchaseForm()
    apply_module_permissions(current_user.role, Module.SILVER_PURCHASE, form, today)
    purchases = _purchases()
    return render_template(
        "silver_purchase/index.html",
        form=form,
        purchases=purchases,
        approvable={p.id for p in purchases if can_approve(current_user, p)},
        total_approved=total_approved(purchases),
    )


@silver_purchase_bp.route("/silver-purchase/data")
@login_required
def data():
    purchases = _purchases()
    return jsonify(
        success=True,
        purchases=[dict(p.to_dict(), can_approve=can_approve(current_user, p)) for p in purchases],
        total_approved=total_approved(purchases),
    )


@silver_purchase_bp.route("/silver-purchase/save", methods=["POST"])
@login_required
def save():
    form = SilverPurchaseForm()
    if not form.validate():
        return json_or_redirect(False, first_form_error(form), "danger", "silver_purchase.index")
    require_edit(Module.SILVER_PURCHASE, form.date_time.data)

    now = datetime.utcnow()
    purchase = SilverPurchase(
        purchase_id=f"SP-{int(now.timestamp() * 1000)}-{secrets.token_hex(2)}",
        date_time=form.date_time.data,
        amount=form.amount.data,
        status="Pending",
        entered_by=current_user.role,
        entered_by_user_id=current_user.id,
        location_id=current_user.location_id,
    )
    db.session.add(purchase)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save silver purchase")
        return json_or_redirect(False, _("Unable to save purchase."), "danger", "silver_purchase.index", status=500)

    current_app.logger.info("Silver purchase %s entered by user %s", purchase.purchase_id, current_user.id)
    return json_or_redirect(True, _("Purchase added."), "success", "silver_purchase.index",
                            purchase=purchase.to_dict())


@silver_purchase_bp.route("/silver-purchase/<int:purchase_id>/approve", methods=["POST"])
@login_required
def approve(purchase_id):
    purchase = db.session.get(SilverPurchase, purchase_id)
    if purchase is None:
        return jsonify(success=False, message=_("Purchase not found.")), 404
    require_edit(Module.SILVER_PURCHASE, purchase.date_time)
    if purchase.status != "Pending":
        return jsonify(success=False, message=_("Purchase is already approved.")), 409
    if purchase.entered_by == current_user.role:
        return jsonify(success=False, message=_("A purchase must be approved by another department.")), 403
    scoped_location = location_filter(current_user)
    if scoped_location is not None and purchase.location_id != scoped_location:
        return jsonify(success=False, message=_("Purchase belongs to another location.")), 403

    purchase.status = "Approved"
    purchase.approved_by = current_user.role
    purchase.approved_at = datetime.utcnow()
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to approve purchase %s", purchase_id)
        return jsonify(success=False, message=_("Unable to approve purchase.")), 500

    current_app.logger.info("Silver purchase %s approved by user %s", purchase.purchase_id, current_user.id)
    return jsonify(success=True, message=_("Purchase approved."), purchase=purchase.to_dict())
