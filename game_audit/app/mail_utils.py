"""Outgoing mail: account notifications sent through Flask-Mail."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from smtplib import SMTPNotSupportedError

from flask import current_app
from flask_babel import gettext as _
from flask_mail import Message

from app import mail
from app.background import submit_background_task

_AUTH_SWAP_LOCK = threading.Lock()


@contextmanager
def _disable_mail_auth_temporarily(mail_state):
    """Temporarily clear SMTP credentials so Flask-Mail skips LOGIN."""
    original_username = getattr(mail_state, "username", None)
    original_password = getattr(mail_state, "password", None)

    mail_state.username = None
    mail_state.password = None
    try:
        yield
    finally:
        mail_state.username = original_username
        mail_state.password = original_password


def send_mail_with_optional_auth(message) -> None:
    """Send a Message, retrying without SMTP AUTH if the server forbids it."""
    try:
        mail.send(message)
        return
    except SMTPNotSupportedError:
        app = current_app._get_current_object()
        if not app.config.get("MAIL_FALLBACK_TO_NO_AUTH", True):
            raise

        mail_state = app.extensions.get("mail")
        if mail_state is None or not getattr(mail_state, "username", None):
            raise

        app.logger.warning(
            "SMTP server %s does not advertise AUTH; retrying without credentials.",
            getattr(mail_state, "server", "<unknown>"),
        )

        with _AUTH_SWAP_LOCK:
            with _disable_mail_auth_temporarily(mail_state):
                mail.send(message)


def queue_mail_with_optional_auth(message, description: str | None = None):
    """Schedule mail delivery on the background executor."""
    recipients = getattr(message, "recipients", None) or []
    inferred = ", ".join(recipients)
    desc = description or (f"email to {inferred}" if inferred else "email send")
    return submit_background_task(
        send_mail_with_optional_auth,
        message,
        description=desc,
    )


def _sender():
    return current_app.config.get("MAIL_DEFAULT_SENDER") or current_app.config.get("MAIL_USERNAME")


def send_password_reset_email(user, reset_url: str) -> bool:
    sender = _sender()
    if not sender:
        current_app.logger.warning("MAIL_DEFAULT_SENDER is not configured; password reset email not sent.")
        return False
    app_name = current_app.config.get("APP_NAME", "Game Audit")
    body = _(
        "Hello %(name)s,\n\n"
        "A password reset was requested for your %(app)s account. "
        "Use the link below to choose a new password:\n\n"
        "%(reset_url)s\n\n"
        "If you did not request this change, please ignore this email.",
        name=user.name,
        app=app_name,
        reset_url=reset_url,
    )
    message = Message(
        subject=_("%(app)s password reset", app=app_name),
        recipients=[user.email],
        body=body,
        sender=sender,
    )
    queue_mail_with_optional_auth(message, description=f"password reset email to {user.email}")
    return True


def send_password_changed_email(user) -> bool:
    sender = _sender()
    if not sender:
        current_app.logger.warning("MAIL_DEFAULT_SENDER is not configured; password change notice not sent.")
        return False
    app_name = current_app.config.get("APP_NAME", "Game Audit")
    body = _(
        "Hello %(name)s,\n\n"
        "The password of your %(app)s account was changed by an administrator. "
        "Contact your location administrator if you did not expect this.",
        name=user.name,
        app=app_name,
    )
    message = Message(
        subject=_("%(app)s password changed", app=app_name),
        recipients=[user.email],
        body=body,
        sender=sender,
    )
    queue_mail_with_optional_auth(message, description=f"password change notice to {user.email}")
    return True
