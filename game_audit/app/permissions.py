# -*- coding: utf-8 -*-
"""
Helpers for module-level access control.

Edit rights depend on the principal's role, the module being changed and,
for operational roles, the business date of the record. Operational roles
may only touch today's or yesterday's records. Viewing is never restricted.

Every decision is made by :class:`AccessPolicy`. Templates get disabled form
controls through :func:`apply_module_permissions`; routes re-check the same
decision with :func:`require_edit` before writing anything.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable, Optional

from flask import abort, current_app, has_app_context
from flask_login import current_user
from wtforms import FieldList, FormField
from wtforms.form import BaseForm

from app.utils.clock import Clock, SystemClock


class Role(str, Enum):
    SUPER_ADMIN = "SuperAdmin"
    LOCATION_ADMIN = "LocationAdmin"
    MANAGER = "Manager"
    AUDIT = "Audit"
    MSP = "MSP"
    SILVER = "Silver"
    SILVER_AGENT = "SilverAgent"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Return the matching role, or ``None`` for anything unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class Module(str, Enum):
    LOCATIONS = "Locations"
    VENDORS = "Vendors"
    MACHINES = "Machines"
    USERS = "Users"
    AUDIT = "Audit"
    MSP = "MSP"
    SILVER = "Silver"
    SILVER_AGENT = "SilverAgent"
    SILVER_PURCHASE = "SilverPurchase"
    APPROVALS = "Approvals"

    @classmethod
    def parse(cls, value: Any) -> Optional["Module"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


FULL_ACCESS_ROLES = frozenset({Role.SUPER_ADMIN, Role.LOCATION_ADMIN})
MANAGER_EDITABLE_MODULES = frozenset({
    Module.VENDORS,
    Module.MACHINES,
    Module.USERS,
    Module.SILVER_PURCHASE,
})
DATE_RESTRICTED_ROLES = frozenset({
    Role.AUDIT,
    Role.MSP,
    Role.SILVER,
    Role.SILVER_AGENT,
})

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_selected_date(value: Any) -> Optional[date]:
    """Coerce a ``YYYY-MM-DD`` string, ``date`` or ``datetime`` to a date.

    Anything else, including impossible calendar dates, returns ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _ISO_DATE.fullmatch(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class Principal:
    role: Optional[str]
    location_id: Optional[int] = None
    user_id: Optional[int] = None

    @classmethod
    def from_user(cls, user) -> Optional["Principal"]:
        if not user or not getattr(user, "is_authenticated", False):
            return None
        return cls(
            role=getattr(user, "role", None),
            location_id=getattr(user, "location_id", None),
            user_id=getattr(user, "id", None),
        )


class AccessPolicy:
    """Role, module and date based edit rules."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def edit_window(self) -> tuple[date, date]:
        today = self.clock.today()
        return today, today - timedelta(days=1)

    def can_edit(self, role: Any, module: Any, selected_date: Any = None) -> bool:
        parsed = Role.parse(role)
        if parsed is None:
            return False
        if parsed in FULL_ACCESS_ROLES:
            return True
        if parsed is Role.MANAGER:
            return Module.parse(module) in MANAGER_EDITABLE_MODULES
        if parsed in DATE_RESTRICTED_ROLES:
            day = parse_selected_date(selected_date)
            if day is None:
                return False
            return day in self.edit_window()
        return False

    def can_view(self, role: Any, module: Any) -> bool:
        return True

    def apply_module_permissions(self, role: Any, module: Any, form, selected_date: Any = None) -> None:
        set_form_enabled(form, self.can_edit(role, module, selected_date))


def _iter_controls(scope: Iterable) -> Iterable:
    for item in scope:
        if isinstance(item, (BaseForm, FormField, FieldList)):
            yield from _iter_controls(item)
        else:
            yield item


def set_form_enabled(form, enabled: bool) -> None:
    """Enable or disable every field of ``form``, nested forms included."""
    if form is None:
        return
    for field in _iter_controls(form):
        render_kw = dict(field.render_kw or {})
        if enabled:
            render_kw.pop("disabled", None)
        else:
            render_kw["disabled"] = True
        field.render_kw = render_kw


def is_disabled(field) -> bool:
    return bool((field.render_kw or {}).get("disabled"))


_DEFAULT_POLICY = AccessPolicy()


def get_policy() -> AccessPolicy:
    if has_app_context():
        policy = current_app.extensions.get("access_policy")
        if policy is not None:
            return policy
    return _DEFAULT_POLICY


def can_edit(role: Any, module: Any, selected_date: Any = None) -> bool:
    return get_policy().can_edit(role, module, selected_date)


def can_view(role: Any, module: Any) -> bool:
    return get_policy().can_view(role, module)


def apply_module_permissions(role: Any, module: Any, form, selected_date: Any = None) -> None:
    get_policy().apply_module_permissions(role, module, form, selected_date)


def apply_module_access(role: Any, module: Any, form, selected_date: Any = None) -> None:
    """Older name kept for existing call sites."""
    apply_module_permissions(role, module, form, selected_date)


def require_view(module: Any, user=None) -> None:
    """Abort with 403 unless ``user`` (default: the session user) may open the module."""
    user = user if user is not None else current_user
    if not user or not getattr(user, "is_authenticated", False):
        abort(403)
    if not can_view(user.role, module):
        abort(403)


def require_edit(module: Any, selected_date: Any = None, user=None) -> None:
    """Abort with 403 unless ``user`` (default: the session user) may edit."""
    user = user if user is not None else current_user
    if not user or not getattr(user, "is_authenticated", False):
        abort(403)
    if not can_edit(user.role, module, selected_date):
        current_app.logger.warning(
            "Denied %s edit for user %s (role=%s, date=%s)",
            getattr(module, "value", module),
            getattr(user, "id", None),
            user.role,
            selected_date,
        )
        abort(403)


def is_super_admin(user) -> bool:
    return Role.parse(getattr(user, "role", None)) is Role.SUPER_ADMIN


def location_filter(user) -> Optional[int]:
    """Location a listing must be restricted to, ``None`` meaning all."""
    if Role.parse(getattr(user, "role", None)) is Role.LOCATION_ADMIN:
        return user.location_id
    return None


def effective_location_id(user, requested: Optional[int] = None) -> Optional[int]:
    """SuperAdmin may pick any location; everyone else works in their own."""
    if is_super_admin(user):
        return requested if requested is not None else user.location_id
    return user.location_id
