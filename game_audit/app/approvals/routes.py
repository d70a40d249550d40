# -*- coding: utf-8 -*-
"""
Delete-request approvals.

Managers file requests to delete accounts; a SuperAdmin, or the
LocationAdmin of the user's location, approves (deleting the account) or
rejects them.
"""

from datetime import datetime

from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.approvals.forms import DecisionForm
from app.models.delete_request import DELETE_REQUEST_STATUSES, DeleteRequest
from app.models.user import User
from app.permissions import Module, Role, apply_module_permissions, location_filter, require_edit, require_view
from app.users.accounts import delete_account
from app.users.hierarchy import UserPermissionError
from app.utils.roles import role_required

approvals_bp = Blueprint("approvals", __name__)


def _scoped_requests():
    query = DeleteRequest.query
    status = request.args.get("status")
    if status in DELETE_REQUEST_STATUSES:
        query = query.filter(DeleteRequest.status == status)
    scoped_location = location_filter(current_user)
    if scoped_location is not None:
        query = query.filter(DeleteRequest.location_id == scoped_location)
    return query.order_by(DeleteRequest.requested_at.desc())


def _load_pending(request_id):
    delete_request = db.session.get(DeleteRequest, request_id)
    if delete_request is None:
        return None, (jsonify(success=False, message=_("Request not found.")), 404)
    scoped_location = location_filter(current_user)
    if scoped_location is not None and delete_request.location_id != scoped_location:
        return None, (jsonify(success=False, message=_("Request belongs to another location.")), 403)
    if not delete_request.is_pending:
        return None, (jsonify(success=False, message=_("Request was already %(status)s.",
                                                       status=delete_request.status)), 409)
    return delete_request, None


@approvals_bp.route("/approvals")
@login_required
@role_required(Role.SUPER_ADMIN, Role.LOCATION_ADMIN)
def index():
    require_view(Module.APPROVALS)
    form = DecisionForm()
    apply_module_permissions(current_user.role, Module.APPROVALS, form)
    return render_template("approvals/index.html", form=form, requests=_scoped_requests().all())


@approvals_bp.route("/approvals/data")
@login_required
@role_required(Role.SUPER_ADMIN, Role.LOCATION_ADMIN)
def data():
    return jsonify(success=True, requests=[req.to_dict() for req in _scoped_requests().all()])


@approvals_bp.route("/approvals/<int:request_id>/approve", methods=["POST"])
@login_required
@role_required(Role.SUPER_ADMIN, Role.LOCATION_ADMIN)
def approve(request_id):
    require_edit(Module.APPROVALS)
    delete_request, failure = _load_pending(request_id)
    if failure:
        return failure

    target = db.session.get(User, delete_request.user_id) if delete_request.user_id else None
    try:
        if target is not None:
            delete_account(current_user, target)
        delete_request.status = "approved"
        delete_request.decided_by = current_user.name
        delete_request.decided_at = datetime.utcnow()
        db.session.commit()
    except UserPermissionError as exc:
        db.session.rollback()
        return jsonify(success=False, message=exc.message), exc.status
    except IntegrityError:
        db.session.rollback()
        current_app.logger.exception("Integrity error approving delete request %s", request_id)
        return jsonify(success=False, message=_("Cannot delete user: related records still exist.")), 409
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to approve delete request %s", request_id)
        return jsonify(success=False, message=_("Unable to approve request.")), 500

    current_app.logger.info("Delete request %s approved by %s", request_id, current_user.id)
    return jsonify(success=True, message=_("User deleted and request approved."))


@approvals_bp.route("/approvals/<int:request_id>/reject", methods=["POST"])
@login_required
@role_required(Role.SUPER_ADMIN, Role.LOCATION_ADMIN)
def reject(request_id):
    require_edit(Module.APPROVALS)
    delete_request, failure = _load_pending(request_id)
    if failure:
        return failure
    delete_request.status = "rejected"
    delete_request.decided_by = current_user.name
    delete_request.decided_at = datetime.utcnow()
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to reject delete request %s", request_id)
        return jsonify(success=False, message=_("Unable to reject request.")), 500
    current_app.logger.info("Delete request %s rejected by %s", request_id, current_user.id)
    return jsonify(success=True, message=_("Request rejected."))
