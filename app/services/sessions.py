import hashlib
import secrets
from datetime import timedelta

from .tokens import utcnow

COOKIE_NAME = "nf_session"


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def hash_session_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def session_expiry(minutes: int = 60 * 24 * 7):
    return utcnow() + timedelta(minutes=minutes)
