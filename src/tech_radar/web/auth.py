"""Password hashing and credential checks.

The web layer uses HTTP Basic: every request carries the e-mail and
password, and there is no server-side session.
"""

from __future__ import annotations

import secrets

import bcrypt

from tech_radar.radar.models import User
from tech_radar.radar.storage import RadarStorage

DEFAULT_ROUNDS = 10

# Compared against when the e-mail is unknown, so both failure paths do a bcrypt check.
_DUMMY_HASH = bcrypt.hashpw(secrets.token_bytes(16), bcrypt.gensalt(rounds=4)).decode()


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        return False


def authenticate(storage: RadarStorage, email: str, password: str) -> User | None:
    """Return the user for valid credentials, else None."""
    user = storage.get_user_by_email(email.strip().lower())
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    return user if verify_password(password, user.password_hash) else None

