# -*- coding: utf-8 -*-
"""
Dashboard tiles and navigation, filtered by the user's role.
"""

from typing import List, Optional, Dict, Any

from flask_babel import lazy_gettext as _l

from app.permissions import Role


ALL_ROLES = [role.value for role in Role]


MENU_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "key": "locations",
        "label": _l("Locations"),
        "icon": "fa fa-location-dot",
        "endpoint": "locations.index",
        "roles": ["SuperAdmin", "Manager"],
        "order": 10,
    },
    {
        "key": "vendors",
        "label": _l("Vendors"),
        "icon": "fa fa-truck",
        "endpoint": "vendors.index",
        "roles": ["SuperAdmin", "LocationAdmin", "Manager", "Audit"],
        "order": 20,
    },
    {
        "key": "machines",
        "label": _l("Machines"),
        "icon": "fa fa-gamepad",
        "endpoint": "machines.index",
        "roles": ["SuperAdmin", "LocationAdmin", "Manager", "Audit"],
        "order": 30,
    },
    {
        "key": "users",
        "label": _l("Users"),
        "icon": "fa fa-users",
        "endpoint": "users.index",
        "roles": ["SuperAdmin", "LocationAdmin", "Manager"],
        "order": 40,
    },
    {
        "key": "audit",
        "label": _l("Audit"),
        "icon": "fa fa-clipboard-check",
        "endpoint": "audit.index",
        "roles": ["SuperAdmin", "LocationAdmin", "Manager", "Audit"],
        "order": 50,
    },
    {
        "key": "msp",
        "label": _l("MSP"),
        "icon": "fa fa-coins",
        "endpoint": "msp.index",
        "roles": ["SuperAdmin", "LocationAdmin", "Manager", "MSP"],
        "order": 60,
    },
    {
        "key": "silver",
        "label": _l("Silver"),
        "icon": "fa fa-cash-register",
        "endpoint": "silver.index",
        "roles": ["SuperAdmin", "LocationAdmin", "Manager", "Silver"],
        "order": 70,
    },
    {
        "key": "silverAgent",
        "label": _l("Agent Silver"),
        "icon": "fa fa-ticket",
        "endpoint": "silver_agent.index",
        "roles": ["SuperAdmin", "LocationAdmin", "Manager", "SilverAgent"],
        "order": 80,
    },
    {
        "key": "silverPurchase",
        "label": _l("Silver Purchase"),
        "icon": "fa fa-cart-shopping",
        "endpoint": "silver_purchase.index",
        "roles": ["SuperAdmin", "LocationAdmin", "Manager", "Silver"],
        "order": 90,
    },
    {
        "key": "approvals",
        "label": _l("Delete Requests"),
        "icon": "fa fa-user-xmark",
        "endpoint": "approvals.index",
        "roles": ["SuperAdmin", "LocationAdmin"],
        "order": 100,
        "show_on_dashboard": False,
    },
]


def default_allowed(item: Dict[str, Any], user) -> bool:
    roles = item.get("roles")
    if not roles:
        return True
    if not user or not getattr(user, "role", None):
        return False
    return user.role in roles


def resolve_menu_item(item: Dict[str, Any], user) -> Optional[Dict[str, Any]]:
    if not user or not getattr(user, "is_authenticated", False):
        return None
    if not default_allowed(item, user):
        return None
    return {
        "key": item["key"],
        "label": str(item["label"]),
        "icon": item.get("icon"),
        "endpoint": item.get("endpoint"),
        "show_on_dashboard": item.get("show_on_dashboard", True),
    }


def get_navigation_for_user(user) -> List[Dict[str, Any]]:
    navigation = []
    for item in sorted(MENU_DEFINITIONS, key=lambda x: x.get("order", 0)):
        resolved = resolve_menu_item(item, user)
        if resolved:
            navigation.append(resolved)
    return navigation


def visible_tiles(user) -> List[str]:
    """Keys of the dashboard tiles shown to ``user``."""
    return [
        item["key"]
        for item in get_navigation_for_user(user)
        if item["show_on_dashboard"]
    ]


def is_feature_allowed(key: str, user) -> bool:
    for item in MENU_DEFINITIONS:
        if item["key"] == key:
            return resolve_menu_item(item, user) is not None
    return False
