# -*- coding: utf-8 -*-
"""
Game Audit back office: Flask application factory.
"""

import os
import logging
from datetime import datetime
from flask import Flask, redirect, request, session, g, url_for, has_request_context
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager, current_user
from flask_mail import Mail
from flask_wtf import CSRFProtect
from flask_babel import Babel
from flask_jwt_extended import JWTManager
from logging.handlers import RotatingFileHandler
from config import Config

# ───────── Extensions ───────── #
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
mail = Mail()
csrf = CSRFProtect()
jwt = JWTManager()
babel = Babel()


def create_app(config_class=Config, clock=None):
    app = Flask(__name__, template_folder="../templates",
                static_folder="../static")
    app.config.from_object(config_class)
    app.config.setdefault("LANGUAGES", ["en"])
    app.config.setdefault("BABEL_DEFAULT_LOCALE", "en")

    mail_password = app.config.get("MAIL_PASSWORD")
    if mail_password and mail_password.startswith("fernet:"):
        from app.utils.security import decrypt_secret
        with app.app_context():
            app.config["MAIL_PASSWORD"] = decrypt_secret(mail_password)

    # ───────── Init extensions ───────── #
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    csrf.init_app(app)
    login_manager.init_app(app)
    jwt.init_app(app)

    # ───────── Access policy (edit window clock) ───────── #
    from app.permissions import AccessPolicy
    from app.utils.clock import SystemClock

    app.extensions["access_policy"] = AccessPolicy(
        clock or SystemClock(app.config.get("APP_TIMEZONE")))

    # ───────── Flask-Login ───────── #
    from app.models.user import User

    @login_manager.user_loader
    def load_user(uid): return db.session.get(User, int(uid))

    login_manager.login_view = "auth.login"
    login_manager.login_message_category = "warning"

    # ───────── JWT claims ───────── #
    @jwt.additional_claims_loader
    def add_claims(identity):
        user = db.session.get(User, int(identity))
        if user is None:
            return {}
        return {"role": user.role, "location_id": user.location_id}

    # ───────── Babel ───────── #
    def get_locale():
        if not has_request_context():
            return app.config["BABEL_DEFAULT_LOCALE"]
        lang = request.args.get("lang")
        if lang in app.config["LANGUAGES"]:
            session["lang"] = lang
            g.locale = lang
            return lang
        stored = session.get("lang")
        if stored in app.config["LANGUAGES"]:
            g.locale = stored
            return stored
        best = request.accept_languages.best_match(app.config["LANGUAGES"])
        g.locale = best or app.config["BABEL_DEFAULT_LOCALE"]
        return g.locale

    babel.init_app(app, locale_selector=get_locale)

    @app.context_processor
    def inject_globals():
        from app.navigation import get_navigation_for_user

        return {
            "current_year": datetime.now().year,
            "navigation": get_navigation_for_user(current_user),
            "app_name": app.config.get("APP_NAME", "Game Audit"),
            "app_version": app.config.get("APP_VERSION", "1.0.0"),
        }

    # ───────── Blueprints ───────── #
    from app.auth.routes import auth_bp
    from app.dashboard.routes import dashboard_bp
    from app.locations.routes import locations_bp
    from app.vendors.routes import vendors_bp
    from app.machines.routes import machines_bp
    from app.users.routes import users_bp
    from app.functions.routes import functions_bp
    from app.approvals.routes import approvals_bp
    from app.audit.routes import audit_bp
    from app.msp.routes import msp_bp
    from app.silver_agent.routes import silver_agent_bp
    from app.silver.routes import silver_bp
    from app.silver_purchase.routes import silver_purchase_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(locations_bp)
    app.register_blueprint(vendors_bp)
    app.register_blueprint(machines_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(functions_bp, url_prefix="/functions/v1")
    app.register_blueprint(approvals_bp)
    app.register_blueprint(audit_bp)
    app.register_blueprint(msp_bp)
    app.register_blueprint(silver_agent_bp)
    app.register_blueprint(silver_bp)
    app.register_blueprint(silver_purchase_bp)

    # ───────── CLI ───────── #
    @app.cli.command("seed-admin")
    def seed_admin():
        """Create the default SuperAdmin account."""
        from app.seeds import ensure_default_admin_with_retry
        ensure_default_admin_with_retry(app)

    # ───────── Logging ───────── #
    log_dir = app.config.get("LOG_DIR") or "logs"
    os.makedirs(log_dir, exist_ok=True)
    if not any(isinstance(h, RotatingFileHandler) for h in app.logger.handlers):
        handler = RotatingFileHandler(
            os.path.join(log_dir, "game_audit.log"), maxBytes=10240, backupCount=10)
        handler.setLevel(app.config.get("LOG_LEVEL", "INFO"))
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        app.logger.addHandler(handler)

    if not any(type(h) is logging.StreamHandler for h in app.logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(app.config.get("LOG_LEVEL", "INFO"))
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        app.logger.addHandler(console_handler)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.logger.propagate = False

    if app.config.get("SQLALCHEMY_ECHO", False) or app.config.get("LOG_LEVEL", "INFO") == "DEBUG":
        sql_logger = logging.getLogger("sqlalchemy.engine")
        sql_logger.setLevel(logging.INFO)
        if not any(isinstance(h, logging.StreamHandler) for h in sql_logger.handlers):
            sql_console = logging.StreamHandler()
            sql_console.setFormatter(logging.Formatter("%(asctime)s [SQL] %(message)s"))
            sql_logger.addHandler(sql_console)
    app.logger.info("Game Audit started")

    # ───────── Root route ───────── #
    @app.route("/")
    def index():
        if current_user.is_authenticated:
            return redirect(url_for("dashboard.index"))
        return redirect(url_for("auth.login"))

    return app
