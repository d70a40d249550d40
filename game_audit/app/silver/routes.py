from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.models.silver import SilverEntry
from app.permissions import (
    Module,
    apply_module_permissions,
    can_edit,
    get_policy,
    location_filter,
    require_edit,
    require_view,
)
from app.silver.forms import SlipScanForm
from app.silver.payouts import PayoutError, process_silver_scan, total_paid
from app.utils.http import first_form_error, json_or_redirect

silver_bp = Blueprint("silver", __name__)


def _entries():
    query = SilverEntry.query
    scoped_location = location_filter(current_user)
    if scoped_location is not None:
        query = query.filter(SilverEntry.location_id == scoped_location)
    return query.order_by(SilverEntry.paid_at.desc()).all()


@silver_bp.route("/silver")
@login_required
def index():
    require_view(Module.SILVER)
    today = get_policy().clock.today()
    form = SlipScanForm()
    apply_module_permissions(current_user.role, Module.SILVER, form, today)
    entries = _entries()
    return render_template(
        "silver/index.html",
        form=form,
        entries=entries,
        total_paid=total_paid(entries),
        can_edit=can_edit(current_user.role, Module.SILVER, today),
    )


@silver_bp.route("/silver/data")
@login_required
def data():
    entries = _entries()
    return jsonify(success=True, entries=[e.to_dict() for e in entries], total_paid=total_paid(entries))


@silver_bp.route("/silver/scan", methods=["POST"])
@login_required
def scan():
    # Payouts are booked on the current business day.
    require_edit(Module.SILVER, get_policy().clock.today())
    form = SlipScanForm()
    if not form.validate():
        return json_or_redirect(False, first_form_error(form), "danger", "silver.index")

    try:
        entry = process_silver_scan(form.slip_no.data, current_user.name, location_filter(current_user))
        db.session.commit()
    except PayoutError as exc:
        db.session.rollback()
        return json_or_redirect(False, exc.message, "danger", "silver.index", status=exc.status)
    except IntegrityError:
        db.session.rollback()
        return json_or_redirect(False, _("This ticket has already been paid."), "danger",
                                "silver.index", status=409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to record payout for slip %s", form.slip_no.data)
        return json_or_redirect(False, _("Unable to record payment."), "danger", "silver.index", status=500)

    current_app.logger.info("Slip %s paid (%.2f) by user %s", entry.slip_no, entry.amount, current_user.id)
    message = _("Payment confirmed by %(name)s: %(amount).2f", name=current_user.name, amount=entry.amount)
    return json_or_redirect(True, message, "success", "silver.index", entry=entry.to_dict())
