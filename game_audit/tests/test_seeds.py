import os

from app.models.user import User


def test_seed_admin_command_creates_superadmin(app, monkeypatch):
    monkeypatch.setenv("DEFAULT_ADMIN_EMAIL", "Owner@RoyalGaming.com")
    monkeypatch.setenv("DEFAULT_ADMIN_PASSWORD", "Own3r!Passw0rd")
    monkeypatch.setenv("DEFAULT_ADMIN_NAME", "Owner")

    result = app.test_cli_runner().invoke(args=["seed-admin"])
    assert result.exit_code == 0

    admin = User.query.filter_by(email="owner@royalgaming.com").one()
    assert admin.role == "SuperAdmin"
    assert admin.check_password("Own3r!Passw0rd")
    assert admin.agent_name == "Super Admin"

    app.test_cli_runner().invoke(args=["seed-admin"])
    assert User.query.count() == 1


def test_seed_skipped_without_password(app, monkeypatch):
    monkeypatch.delenv("DEFAULT_ADMIN_PASSWORD", raising=False)
    app.test_cli_runner().invoke(args=["seed-admin"])
    assert User.query.count() == 0


def test_log_file_is_created(app):
    log_dir = app.config["LOG_DIR"]
    assert os.path.isdir(log_dir)
