from flask import Blueprint, render_template, redirect, url_for, request, flash, current_app
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy import func
from urllib.parse import urlparse, urljoin

from app import db
from app.auth.forms import LoginForm, ForgotPasswordForm, ResetPasswordForm
from app.auth.tokens import generate_reset_token, load_user_from_token
from app.mail_utils import send_password_reset_email
from app.models.user import User
from app.utils.security import validate_password_strength
from flask_babel import gettext as _


auth_bp = Blueprint("auth", __name__)


def _is_safe_redirect(target: str) -> bool:
    if not target:
        return False
    ref_url = urlparse(request.host_url)
    test_url = urlparse(urljoin(request.host_url, target))
    return (
        test_url.scheme in {"http", "https"}
        and ref_url.netloc == test_url.netloc
    )


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("dashboard.index"))
    form = LoginForm()
    if form.validate_on_submit():
        email = form.email.data.strip().lower()
        user = User.query.filter(func.lower(User.email) == email).first()
        if not user or not user.check_password(form.password.data):
            current_app.logger.warning("Failed login for %s", email)
            flash(_("Incorrect credentials."), "danger")
        elif not user.active:
            flash(_("Account is disabled."), "danger")
        else:
            login_user(user, remember=bool(form.remember.data))
            current_app.logger.info("User %s signed in (role=%s)", user.id, user.role)
            flash(_("Welcome, %(name)s!", name=user.name), "success")
            next_url = request.args.get("next")
            if next_url and _is_safe_redirect(next_url):
                return redirect(next_url)
            return redirect(url_for("dashboard.index"))
    return render_template("auth/login.html", form=form)


@auth_bp.route("/logout")
@login_required
def logout():
    logout_user()
    flash(_("You have been logged out."), "info")
    return redirect(url_for("auth.login"))


@auth_bp.route("/forgot-password", methods=["GET", "POST"])
def forgot_password():
    form = ForgotPasswordForm()
    email_sent = False
    if form.validate_on_submit():
        email = form.email.data.strip().lower()
        user = (
            User.query.filter(func.lower(User.email) == email)
            .filter(User.active.is_(True))
            .first()
        )
        if user:
            reset_url = url_for("auth.reset_password", token=generate_reset_token(user), _external=True)
            send_password_reset_email(user, reset_url)
        # Same answer whether or not the account exists.
        email_sent = True
    return render_template("auth/forgot_password.html", form=form, email_sent=email_sent)


@auth_bp.route("/reset-password/<token>", methods=["GET", "POST"])
def reset_password(token):
    user = load_user_from_token(token)
    if not user:
        return render_template("auth/reset_password.html", form=None, token_invalid=True)

    form = ResetPasswordForm()
    if form.validate_on_submit():
        ok, password_errors = validate_password_strength(form.password.data)
        if not ok:
            for msg in password_errors:
                flash(_(msg), "danger")
        else:
            user.set_password(form.password.data)
            db.session.commit()
            current_app.logger.info("Password reset completed for user %s", user.id)
            flash(_("Your password has been updated. Please sign in."), "success")
            return redirect(url_for("auth.login"))

    return render_template("auth/reset_password.html", form=form, token_invalid=False)
