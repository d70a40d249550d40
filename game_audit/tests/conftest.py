"""
Pytest configuration and fixtures.
"""
from datetime import date

import pytest
from flask import g

from app import create_app, db as _db
from app.models.location import Location
from app.models.user import User
from app.utils.clock import FixedClock
from config import Config

TODAY = date(2024, 6, 15)
PASSWORD = "Str0ng!Passw0rd"


class _TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret-key"
    JWT_SECRET_KEY = "testing-jwt-secret-key-for-bearer-tokens"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ECHO = False
    WTF_CSRF_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = "backoffice@royalgaming.com"
    BACKGROUND_TASKS_INLINE = True
    LOG_LEVEL = "WARNING"
    PAGE_SIZE = 5


@pytest.fixture
def app(tmp_path):
    """Application with an in-memory database and the clock fixed at TODAY."""
    config = type("IsolatedConfig", (_TestingConfig,), {"LOG_DIR": str(tmp_path / "logs")})
    app = create_app(config, clock=FixedClock(TODAY))

    @app.teardown_request
    def _forget_request_user(exc):
        # The app context below outlives each request.
        g.pop("_login_user", None)

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def xhr():
    """Headers that make mutation routes answer with JSON."""
    return {"X-Requested-With": "XMLHttpRequest"}


@pytest.fixture
def location(db):
    loc = Location(code="NPL-KTM-001", name="Thamel Hall", city="Kathmandu", country="Nepal")
    db.session.add(loc)
    db.session.commit()
    return loc


@pytest.fixture
def other_location(db):
    loc = Location(code="NPL-POK-001", name="Lakeside Hall", city="Pokhara", country="Nepal")
    db.session.add(loc)
    db.session.commit()
    return loc


@pytest.fixture
def make_user(db):
    """Create users: ``make_user("Audit", location)``."""
    counter = {"n": 0}

    def _make(role, location=None, email=None, name=None, password=PASSWORD, active=True):
        counter["n"] += 1
        user = User(
            name=name or f"{role} User {counter['n']}",
            email=email or f"{role.lower()}{counter['n']}@royalgaming.com",
            role=role,
            location_id=location.id if location is not None else None,
            active=active,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def login(app):
    """Return a test client signed in as ``user``."""

    def _login(user, password=PASSWORD):
        client = app.test_client()
        response = client.post("/login", data={"email": user.email, "password": password})
        assert response.status_code == 302, "login failed"
        return client

    return _login
