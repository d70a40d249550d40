# -*- coding: utf-8 -*-
"""
Who may manage whom.

Every privileged user operation, whether it comes from the users page or
from a bearer-token client, is checked here on the server.
"""

from typing import List, Optional

from flask_babel import gettext as _

from app.permissions import Module, Role, can_edit

ROLE_HIERARCHY = {
    Role.SUPER_ADMIN: [
        Role.SUPER_ADMIN,
        Role.LOCATION_ADMIN,
        Role.MANAGER,
        Role.AUDIT,
        Role.MSP,
        Role.SILVER,
        Role.SILVER_AGENT,
    ],
    Role.LOCATION_ADMIN: [Role.MANAGER, Role.AUDIT, Role.MSP, Role.SILVER, Role.SILVER_AGENT],
    Role.MANAGER: [Role.AUDIT, Role.MSP, Role.SILVER, Role.SILVER_AGENT],
}


class UserPermissionError(Exception):
    """Raised when an editor may not perform a user operation."""

    def __init__(self, message, status=403):
        super().__init__(message)
        self.message = message
        self.status = status


def assignable_roles(editor_role) -> List[Role]:
    parsed = Role.parse(editor_role)
    if parsed is None:
        return []
    return list(ROLE_HIERARCHY.get(parsed, []))


def check_user_change(editor, target=None, new_role=None, new_location_id=None) -> None:
    """Raise :class:`UserPermissionError` unless ``editor`` may make the change.

    ``target`` is ``None`` for account creation.
    """
    if not can_edit(editor.role, Module.USERS):
        raise UserPermissionError(_("You are not allowed to manage users."))

    editor_role = Role.parse(editor.role)
    allowed = assignable_roles(editor_role)

    if target is not None:
        if Role.parse(target.role) is Role.SUPER_ADMIN and editor_role is not Role.SUPER_ADMIN:
            raise UserPermissionError(_("Only SuperAdmin can modify a SuperAdmin."))
        if editor_role is not Role.SUPER_ADMIN and Role.parse(target.role) not in allowed:
            raise UserPermissionError(_("You cannot manage users with the %(role)s role.", role=target.role))
        if editor_role is Role.LOCATION_ADMIN and target.location_id != editor.location_id:
            raise UserPermissionError(_("You can only manage users of your own location."))

    if new_role is not None:
        parsed_role = Role.parse(new_role)
        if parsed_role is None:
            raise UserPermissionError(_("Unknown role %(role)s.", role=new_role), status=400)
        if parsed_role not in allowed:
            raise UserPermissionError(_("You cannot assign the %(role)s role.", role=new_role))

    if editor_role is Role.LOCATION_ADMIN and new_location_id is not None \
            and new_location_id != editor.location_id:
        raise UserPermissionError(_("You can only assign users to your own location."))


def check_user_delete(editor, target) -> None:
    if editor.id == target.id:
        raise UserPermissionError(_("You cannot delete your own account."), status=400)
    if Role.parse(target.role) is Role.SUPER_ADMIN and Role.parse(editor.role) is not Role.SUPER_ADMIN:
        raise UserPermissionError(_("Only SuperAdmin can delete a SuperAdmin."))
    check_user_change(editor, target)


def users_in_scope(query, editor, model):
    """Restrict a user query to what ``editor`` may see."""
    if Role.parse(editor.role) is Role.LOCATION_ADMIN:
        return query.filter(model.location_id == editor.location_id)
    return query


def scope_location(editor) -> Optional[int]:
    if Role.parse(editor.role) is Role.LOCATION_ADMIN:
        return editor.location_id
    return None
