# -*- coding: utf-8 -*-
"""
Account operations shared by the users page and the ``/functions/v1``
handlers.

Every function checks the editor's rights before touching the session and
leaves the commit to the caller. Refusals raise
:class:`~app.users.hierarchy.UserPermissionError` carrying the HTTP status
to answer with.
"""

from flask import url_for
from flask_babel import gettext as _
from sqlalchemy import func

from app import db
from app.auth.tokens import generate_reset_token
from app.mail_utils import send_password_reset_email
from app.models.delete_request import DeleteRequest
from app.models.location import Location
from app.models.user import User
from app.permissions import FULL_ACCESS_ROLES, Role
from app.users.hierarchy import UserPermissionError, check_user_change, check_user_delete
from app.utils.security import validate_password_strength

PROFILE_FIELDS = ("name", "phone", "department")


def parse_location(value):
    if value in (None, ""):
        return None
    try:
        location_id = int(value)
    except (TypeError, ValueError):
        raise UserPermissionError(_("Invalid location."), status=400)
    if db.session.get(Location, location_id) is None:
        raise UserPermissionError(_("Unknown location."), status=400)
    return location_id


def _email_taken(email, exclude_id=None):
    query = User.query.filter(func.lower(User.email) == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def _password_problem(password):
    ok, errors = validate_password_strength(password)
    if ok:
        return None
    return " ".join(_(msg) for msg in errors)


def _own_location_default(editor, location_id):
    if location_id is None and Role.parse(editor.role) is Role.LOCATION_ADMIN:
        return editor.location_id
    return location_id


def create_account(editor, values):
    """Add a user built from ``values`` (form or JSON fields) to the session."""
    name = (values.get("name") or "").strip()
    email = (values.get("email") or "").strip().lower()
    password = values.get("password") or ""
    role = values.get("role")
    if not name or not email or not password or not role:
        raise UserPermissionError(_("Name, email, password and role are required."), status=400)

    location_id = _own_location_default(editor, parse_location(values.get("location_id")))
    check_user_change(editor, None, new_role=role, new_location_id=location_id)

    if _email_taken(email):
        raise UserPermissionError(_("An account with that email already exists."), status=409)
    problem = _password_problem(password)
    if problem:
        raise UserPermissionError(problem, status=400)

    user = User(
        name=name,
        email=email,
        role=role,
        location_id=location_id,
        phone=(values.get("phone") or "").strip() or None,
        department=(values.get("department") or "").strip() or None,
        active=(values.get("status") or "Active") != "Inactive",
    )
    user.set_password(password)
    db.session.add(user)
    return user


def update_account(editor, target, values):
    """Apply ``values`` to ``target``.

    Only keys present in ``values`` are changed. A weak password does not
    fail the update; the returned warning says it was kept.
    """
    new_role = values.get("role") or None
    new_location_id = target.location_id
    if "location_id" in values:
        new_location_id = _own_location_default(editor, parse_location(values.get("location_id")))
    check_user_change(editor, target, new_role=new_role, new_location_id=new_location_id)

    if "name" in values and not (values.get("name") or "").strip():
        raise UserPermissionError(_("Name is required."), status=400)
    email = (values.get("email") or "").strip().lower()
    if email and email != target.email:
        if _email_taken(email, exclude_id=target.id):
            raise UserPermissionError(_("An account with that email already exists."), status=409)
        target.email = email

    for attr in PROFILE_FIELDS:
        if attr in values:
            setattr(target, attr, (values.get(attr) or "").strip() or None)
    if new_role:
        target.role = new_role
    target.location_id = new_location_id
    if values.get("status") in ("Active", "Inactive"):
        target.active = values["status"] == "Active"

    password = values.get("password") or ""
    if password:
        problem = _password_problem(password)
        if problem is None:
            target.set_password(password)
        else:
            return _("Profile updated but the password was not changed: %(reason)s", reason=problem)
    return None


def change_password(editor, target, new_password):
    check_user_change(editor, target)
    problem = _password_problem(new_password)
    if problem:
        raise UserPermissionError(problem, status=400)
    target.set_password(new_password)


def delete_account(editor, target):
    """Delete ``target`` and close any pending delete requests for it."""
    check_user_delete(editor, target)
    if Role.parse(editor.role) not in FULL_ACCESS_ROLES:
        raise UserPermissionError(_("Only administrators can delete users. File a delete request instead."))
    for pending in DeleteRequest.query.filter_by(user_id=target.id, status="pending").all():
        pending.status = "approved"
        pending.decided_by = editor.name
    DeleteRequest.query.filter_by(user_id=target.id).update({"user_id": None})
    db.session.delete(target)


def file_delete_request(editor, target):
    check_user_delete(editor, target)
    if DeleteRequest.query.filter_by(user_id=target.id, status="pending").first():
        raise UserPermissionError(_("A delete request for this user is already pending."), status=409)
    delete_request = DeleteRequest(
        user_id=target.id,
        user_name=target.name,
        user_email=target.email,
        location_id=target.location_id,
        requested_by=editor.name,
        requested_by_role=editor.role,
        status="pending",
    )
    db.session.add(delete_request)
    return delete_request


def send_recovery_link(editor, target):
    check_user_change(editor, target)
    reset_url = url_for("auth.reset_password", token=generate_reset_token(target), _external=True)
    if not send_password_reset_email(target, reset_url):
        raise UserPermissionError(_("Mail is not configured; recovery link not sent."), status=503)
