"""Signed password-reset tokens."""
from typing import Optional

from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from app import db
from app.models.user import User


def _get_serializer() -> URLSafeTimedSerializer:
    secret_key = current_app.config.get("SECRET_KEY")
    return URLSafeTimedSerializer(secret_key, salt="game-audit-password-reset")


def generate_reset_token(user: User) -> str:
    # Binding the hash invalidates the link once the password changes.
    return _get_serializer().dumps({"user_id": user.id, "hash": user.password_hash})


def load_user_from_token(token: str) -> Optional[User]:
    max_age = current_app.config.get("PASSWORD_RESET_MAX_AGE", 3600)
    try:
        data = _get_serializer().loads(token, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None
    user_id = data.get("user_id")
    token_hash = data.get("hash")
    if not user_id or not token_hash:
        return None
    user = db.session.get(User, user_id)
    if not user or not user.active or user.password_hash != token_hash:
        return None
    return user
