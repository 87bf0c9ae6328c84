import re
from functools import lru_cache
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import bcrypt
import jwt


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    # Checked when no credential exists so that every failed signin costs one bcrypt round.
    return bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=rounds)).decode()


def validate_password(password: str) -> List[str]:
    """Return every policy violation for ``password``; empty when it is acceptable."""
    errors = []
    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    return errors


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed_password: Optional[str], rounds: int) -> bool:
    """Constant-effort check: a missing or malformed hash still runs bcrypt."""
    dummy = _dummy_hash(rounds)
    candidate = hashed_password or dummy
    try:
        matched = bcrypt.checkpw(_password_bytes(password), candidate.encode("utf-8"))
    except ValueError:
        bcrypt.checkpw(_password_bytes(password), dummy.encode("utf-8"))
        return False
    return matched and hashed_password is not None


def create_access_token(
    subject: str,
    secret: str,
    algorithm: str = "HS256",
    expires_in: int = 3600,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    if extra_claims:
        payload.update(extra_claims)
    return jwt.encode(payload, secret, algorithm=algorithm)

