from flask import Blueprint, render_template, request, jsonify, current_app
from flask_login import login_required, current_user
from flask_babel import gettext as _
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.models.user import User
from app.permissions import (
    FULL_ACCESS_ROLES,
    Module,
    Role,
    apply_module_permissions,
    can_edit,
    require_edit,
    require_view,
)
from app.users.accounts import (
    create_account,
    delete_account,
    file_delete_request,
    send_recovery_link,
    update_account,
)
from app.users.forms import UserForm
from app.users.hierarchy import UserPermissionError, assignable_roles, scope_location, users_in_scope
from app.utils.choices import location_choices
from app.utils.http import first_form_error, json_or_redirect, parse_int

users_bp = Blueprint("users", __name__)


def _filtered_users(args):
    query = users_in_scope(User.query, current_user, User)
    search = (args.get("q") or "").strip().lower()
    if search:
        like = f"%{search}%"
        query = query.filter(or_(func.lower(User.name).like(like), func.lower(User.email).like(like)))
    role = args.get("role")
    if Role.parse(role) is not None:
        query = query.filter(User.role == role)
    status = args.get("status")
    if status in ("Active", "Inactive"):
        query = query.filter(User.active.is_(status == "Active"))
    return query.order_by(User.name.asc())


def _build_form():
    form = UserForm()
    form.role.choices = [(role.value, role.value) for role in assignable_roles(current_user.role)]
    form.location_id.choices = location_choices(only_id=scope_location(current_user))
    return form


def _deletes_directly(user):
    return Role.parse(user.role) in FULL_ACCESS_ROLES


@users_bp.route("/users")
@login_required
def index():
    require_view(Module.USERS)
    form = _build_form()
    apply_module_permissions(current_user.role, Module.USERS, form)
    users = _filtered_users(request.args).all()
    return render_template(
        "users/index.html",
        form=form,
        users=users,
        can_edit=can_edit(current_user.role, Module.USERS),
        can_delete_directly=_deletes_directly(current_user),
    )


@users_bp.route("/users/data")
@login_required
def data():
    users = _filtered_users(request.args).all()
    return jsonify(success=True, users=[user.to_dict() for user in users])


@users_bp.route("/users/save", methods=["POST"])
@login_required
def save():
    """Create or update from the users form; its Delete and reset buttons post here too."""
    require_edit(Module.USERS)
    editor = current_user._get_current_object()
    form = _build_form()

    target = None
    user_id = parse_int("id")
    if user_id is not None:
        target = db.session.get(User, user_id)
        if target is None:
            return json_or_redirect(False, _("User not found."), "danger", "users.index", status=404)

    if form.delete.data or form.reset_password.data:
        if target is None:
            return json_or_redirect(False, _("Select a user first."), "danger", "users.index")
        if form.delete.data:
            return _remove(editor, target)
        return _send_reset(editor, target)

    if not form.validate():
        return json_or_redirect(False, first_form_error(form), "danger", "users.index")

    values = {
        "name": form.name.data,
        "email": form.email.data,
        "password": form.password.data,
        "role": form.role.data,
        "location_id": form.location_id.data,
        "status": form.status.data,
        "phone": form.phone.data,
        "department": form.department.data,
    }
    warning = None
    try:
        if target is None:
            user = create_account(editor, values)
        else:
            warning = update_account(editor, target, values)
            user = target
        db.session.commit()
    except UserPermissionError as exc:
        db.session.rollback()
        current_app.logger.warning("User save denied for editor %s: %s", editor.id, exc.message)
        return json_or_redirect(False, exc.message, "danger", "users.index", status=exc.status)
    except IntegrityError:
        db.session.rollback()
        return json_or_redirect(False, _("An account with that email already exists."), "danger",
                                "users.index", status=409)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save user %s", form.email.data)
        return json_or_redirect(False, _("Unable to save user."), "danger", "users.index", status=500)

    current_app.logger.info("User %s %s by %s", user.id, "created" if target is None else "updated", editor.id)
    if warning:
        return json_or_redirect(True, warning, "warning", "users.index", user=user.to_dict())
    message = _("User created.") if target is None else _("User updated.")
    return json_or_redirect(True, message, "success", "users.index", user=user.to_dict())


def _remove(editor, target):
    if not _deletes_directly(editor):
        return _file_request(editor, target)
    target_id = target.id
    try:
        delete_account(editor, target)
        db.session.commit()
    except UserPermissionError as exc:
        db.session.rollback()
        return json_or_redirect(False, exc.message, "danger", "users.index", status=exc.status)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete user %s", target_id)
        return json_or_redirect(False, _("Unable to delete user."), "danger", "users.index", status=500)
    current_app.logger.info("User %s deleted by %s", target_id, editor.id)
    return json_or_redirect(True, _("User deleted."), "success", "users.index")


def _file_request(editor, target):
    try:
        delete_request = file_delete_request(editor, target)
        db.session.commit()
    except UserPermissionError as exc:
        db.session.rollback()
        return json_or_redirect(False, exc.message, "danger", "users.index", status=exc.status)
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to file delete request for user %s", target.id)
        return json_or_redirect(False, _("Unable to file delete request."), "danger", "users.index", status=500)
    current_app.logger.info("Delete request %s filed for user %s by %s", delete_request.id, target.id, editor.id)
    return json_or_redirect(True, _("Delete request sent for approval."), "success", "users.index",
                            status=201, request=delete_request.to_dict())


def _send_reset(editor, target):
    try:
        send_recovery_link(editor, target)
    except UserPermissionError as exc:
        return json_or_redirect(False, exc.message, "danger", "users.index", status=exc.status)
    current_app.logger.info("Recovery link for user %s requested by %s", target.id, editor.id)
    return json_or_redirect(True, _("Recovery link sent to %(email)s.", email=target.email), "success",
                            "users.index")


@users_bp.route("/users/<int:user_id>/delete-request", methods=["POST"])
@login_required
def request_delete(user_id):
    """Managers cannot delete accounts; they ask an administrator to."""
    require_edit(Module.USERS)
    target = db.session.get(User, user_id)
    if target is None:
        return jsonify(success=False, message=_("User not found.")), 404
    editor = current_user._get_current_object()
    try:
        delete_request = file_delete_request(editor, target)
        db.session.commit()
    except UserPermissionError as exc:
        db.session.rollback()
        return jsonify(success=False, message=exc.message), exc.status
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to file delete request for user %s", user_id)
        return jsonify(success=False, message=_("Unable to file delete request.")), 500

    current_app.logger.info("Delete request %s filed for user %s by %s", delete_request.id, target.id, editor.id)
    return jsonify(success=True, message=_("Delete request sent for approval."), request=delete_request.to_dict()), 201
