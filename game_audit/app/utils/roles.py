from functools import wraps
from flask import abort
from flask_login import current_user

from app.permissions import Role


def role_required(*roles):
    """
    Restrict access to users whose role is in the given list.
    Example: @role_required(Role.SUPER_ADMIN, Role.LOCATION_ADMIN)
    """
    allowed = {Role.parse(role) for role in roles} - {None}

    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                abort(403)
            if Role.parse(current_user.role) not in allowed:
                abort(403)
            return f(*args, **kwargs)
        return wrapper
    return decorator
