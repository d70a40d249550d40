import os
from time import sleep
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import OperationalError

from app import db
from app.models.user import User
from app.permissions import Role


def _should_create_admin() -> bool:
    return _env_bool("CREATE_DEFAULT_ADMIN", True)


def _should_sync_existing_admin() -> bool:
    return _env_bool("DEFAULT_ADMIN_SYNC", False)


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env(key: str, default: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def ensure_default_admin(app: Any) -> None:
    """Create the first SuperAdmin account if it does not exist yet."""
    if not _should_create_admin():
        app.logger.info("Skipping default admin creation (CREATE_DEFAULT_ADMIN disabled).")
        return

    email = (_env("DEFAULT_ADMIN_EMAIL", "admin@example.com") or "").lower()
    password = _env("DEFAULT_ADMIN_PASSWORD")
    name = _env("DEFAULT_ADMIN_NAME", "Super Admin")

    if not password:
        app.logger.warning("DEFAULT_ADMIN_PASSWORD not provided; cannot seed default admin.")
        return

    existing = User.query.filter(func.lower(User.email) == email).first()
    if existing:
        if not _should_sync_existing_admin():
            app.logger.debug("Default admin seed skipped; matching user already exists.")
            return
        if existing.role != Role.SUPER_ADMIN.value:
            app.logger.warning(
                "Existing user %s has role %s; promoting to SuperAdmin.", email, existing.role)
            existing.role = Role.SUPER_ADMIN.value
        existing.name = name or existing.name
        existing.active = True
        existing.set_password(password)
        db.session.commit()
        app.logger.info("Default admin updated in place (email=%s).", email)
        return

    admin = User(
        name=name,
        email=email,
        role=Role.SUPER_ADMIN.value,
        active=True,
    )
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    app.logger.info("Default admin created (email=%s).", email)


def ensure_default_admin_with_retry(app: Any) -> None:
    """Retry wrapper so container startup can handle transient DB availability."""
    attempts = int(_env("DEFAULT_ADMIN_RETRY_ATTEMPTS", "5") or "5")
    delay = float(_env("DEFAULT_ADMIN_RETRY_DELAY", "2") or "2")

    for attempt in range(1, attempts + 1):
        try:
            with app.app_context():
                ensure_default_admin(app)
            return
        except OperationalError as exc:
            if attempt == attempts:
                app.logger.error(
                    "Unable to seed default admin after %d attempts: %s", attempt, exc
                )
                raise
            app.logger.warning(
                "Database not ready (attempt %d/%d): %s; retrying in %.1f sec",
                attempt,
                attempts,
                exc,
                delay,
            )
            sleep(delay)
