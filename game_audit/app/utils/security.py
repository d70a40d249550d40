import base64, os, re, hashlib
from typing import List, Tuple, Optional
from cryptography.fernet import Fernet, InvalidToken
from flask import current_app, has_app_context

_FERNET_INSTANCE: Optional[Fernet] = None


def _get_fernet() -> Fernet:
    global _FERNET_INSTANCE
    if _FERNET_INSTANCE is not None:
        return _FERNET_INSTANCE
    key = os.environ.get('FERNET_KEY')
    has_ctx = has_app_context()
    if not key and has_ctx:
        key = current_app.config.get('FERNET_KEY')
    if not key:
        seed = os.environ.get('SECRET_KEY')
        if not seed and has_ctx:
            seed = current_app.config.get('SECRET_KEY')
        if seed:
            digest = hashlib.sha256(seed.encode()).digest()
            key = base64.urlsafe_b64encode(digest).decode()
    if not key:
        raise RuntimeError(
            "FERNET_KEY is not configured and no SECRET_KEY available to derive one."
        )
    key_bytes = key.encode() if isinstance(key, str) else key
    _FERNET_INSTANCE = Fernet(key_bytes)
    return _FERNET_INSTANCE


def encrypt_secret(secret: str) -> str:
    """Encrypt a config secret (e.g. MAIL_PASSWORD) for storage in .env."""
    token = _get_fernet().encrypt(secret.encode()).decode()
    return 'fernet:' + token


def decrypt_secret(token: str) -> str:
    if not token.startswith('fernet:'):
        return token
    enc = token.split(':', 1)[1]
    try:
        return _get_fernet().decrypt(enc.encode()).decode()
    except InvalidToken as exc:
        raise RuntimeError("Encrypted secret cannot be decrypted with the configured key.") from exc


def validate_password_strength(password: str) -> Tuple[bool, List[str]]:
    """
    Validate password strength. Returns (is_valid, [error messages]).
    Requirements:
      - minimum length 12
      - contains uppercase, lowercase, digit, and symbol
      - contains no whitespace
    """

    errors: List[str] = []
    if password is None:
        password = ""
    if len(password) < 12:
        errors.append("Password must be at least 12 characters long.")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must include at least one uppercase letter.")
    if not re.search(r"[a-z]", password):
        errors.append("Password must include at least one lowercase letter.")
    if not re.search(r"[0-9]", password):
        errors.append("Password must include at least one number.")
    if not re.search(r"[^A-Za-z0-9]", password):
        errors.append("Password must include at least one symbol.")
    if re.search(r"\s", password):
        errors.append("Password cannot contain whitespace characters.")
    return len(errors) == 0, errors
