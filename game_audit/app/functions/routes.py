# -*- coding: utf-8 -*-
"""
Privileged user operations.

JSON endpoints for API clients (bearer token from ``/functions/v1/token``)
and scripts running with a session cookie. The caller's right to perform
each operation is checked in :mod:`app.users.accounts`, independently of
what any page allowed.
"""

from flask import Blueprint, request, jsonify, current_app
from flask_login import current_user
from flask_babel import gettext as _
from flask_jwt_extended import create_access_token, get_jwt_identity, verify_jwt_in_request
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db, csrf
from app.mail_utils import send_password_changed_email
from app.models.user import User
from app.users.accounts import (
    change_password,
    create_account,
    delete_account,
    send_recovery_link,
    update_account,
)
from app.users.hierarchy import UserPermissionError

functions_bp = Blueprint("functions", __name__)
csrf.exempt(functions_bp)


def _current_editor():
    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()
    if identity is not None:
        user = db.session.get(User, int(identity))
        return user if user is not None and user.active else None
    if current_user.is_authenticated:
        return current_user._get_current_object()
    return None


def _error(message, status):
    return jsonify(success=False, error=message, message=message), status


def _denied(operation, editor, exc):
    db.session.rollback()
    current_app.logger.warning("%s denied for editor %s: %s", operation, editor.id, exc.message)
    return _error(exc.message, exc.status)


def _payload():
    return request.get_json(silent=True) or {}


def _target_from(payload):
    raw_id = payload.get("user_id", payload.get("id"))
    if raw_id in (None, ""):
        return None, _error(_("user_id is required"), 400)
    try:
        user_id = int(raw_id)
    except (TypeError, ValueError):
        return None, _error(_("user_id is invalid"), 400)
    target = db.session.get(User, user_id)
    if target is None:
        return None, _error(_("User not found."), 404)
    return target, None


@functions_bp.before_request
def _require_json():
    if request.method == "POST" and not request.is_json:
        return _error(_("Expected a JSON body."), 415)
    return None


@functions_bp.route("/token", methods=["POST"])
def token():
    payload = _payload()
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password") or ""
    user = User.query.filter(func.lower(User.email) == email).first() if email else None
    if not user or not user.active or not user.check_password(password):
        current_app.logger.warning("Token request rejected for %s", email or "<blank>")
        return _error(_("Incorrect credentials."), 401)
    access_token = create_access_token(identity=str(user.id))
    return jsonify(success=True, access_token=access_token, role=user.role, location_id=user.location_id)


@functions_bp.route("/create_user", methods=["POST"])
def create_user():
    editor = _current_editor()
    if editor is None:
        return _error(_("Authentication required."), 401)

    try:
        user = create_account(editor, _payload())
        db.session.commit()
    except UserPermissionError as exc:
        return _denied("create_user", editor, exc)
    except IntegrityError:
        db.session.rollback()
        return _error(_("An account with that email already exists."), 409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to create user")
        return _error(_("Unable to create user."), 500)

    current_app.logger.info("User %s (%s) created by %s", user.id, user.role, editor.id)
    return jsonify(success=True, user=user.to_dict()), 201


@functions_bp.route("/update_user", methods=["POST"])
def update_user():
    editor = _current_editor()
    if editor is None:
        return _error(_("Authentication required."), 401)
    payload = _payload()
    target, failure = _target_from(payload)
    if failure:
        return failure

    try:
        warning = update_account(editor, target, payload)
        db.session.commit()
    except UserPermissionError as exc:
        return _denied("update_user", editor, exc)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to update user %s", target.id)
        return _error(_("Unable to update user."), 500)

    current_app.logger.info("User %s updated by %s", target.id, editor.id)
    response = {"success": True, "user": target.to_dict()}
    if warning:
        response["warning"] = warning
    return jsonify(response)


@functions_bp.route("/delete_user", methods=["POST"])
def delete_user():
    editor = _current_editor()
    if editor is None:
        return _error(_("Authentication required."), 401)
    target, failure = _target_from(_payload())
    if failure:
        return failure

    target_id = target.id
    try:
        delete_account(editor, target)
        db.session.commit()
    except UserPermissionError as exc:
        return _denied("delete_user", editor, exc)
    except IntegrityError:
        db.session.rollback()
        current_app.logger.exception("Integrity error deleting user %s", target_id)
        return _error(_("Cannot delete user: related records still exist."), 409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete user %s", target_id)
        return _error(_("Unable to delete user."), 500)

    current_app.logger.info("User %s deleted by %s", target_id, editor.id)
    return jsonify(success=True)


@functions_bp.route("/update_password", methods=["POST"])
def update_password():
    editor = _current_editor()
    if editor is None:
        return _error(_("Authentication required."), 401)
    payload = _payload()
    target, failure = _target_from(payload)
    if failure:
        return failure

    new_password = payload.get("new_password") or payload.get("newPassword") or ""
    try:
        change_password(editor, target, new_password)
        db.session.commit()
    except UserPermissionError as exc:
        return _denied("update_password", editor, exc)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to update password of user %s", target.id)
        return _error(_("Unable to update password."), 500)

    notified = send_password_changed_email(target)
    current_app.logger.info("Password of user %s changed by %s", target.id, editor.id)
    return jsonify(success=True, notified=notified)


@functions_bp.route("/reset_password", methods=["POST"])
def reset_password():
    editor = _current_editor()
    if editor is None:
        return _error(_("Authentication required."), 401)
    payload = _payload()
    if payload.get("user_id") in (None, "") and payload.get("email"):
        email = payload["email"].strip().lower()
        target = User.query.filter(func.lower(User.email) == email).first()
        if target is None:
            return _error(_("User not found."), 404)
    else:
        target, failure = _target_from(payload)
        if failure:
            return failure

    try:
        send_recovery_link(editor, target)
    except UserPermissionError as exc:
        return _denied("reset_password", editor, exc)
    current_app.logger.info("Recovery link for user %s requested by %s", target.id, editor.id)
    return jsonify(success=True, message=_("Recovery link sent to %(email)s.", email=target.email))
