"""
Password hashing and signed access tokens.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt
from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


def create_access_token(
    claims: Dict[str, Any],
    secret: str,
    lifetime_minutes: int,
    algorithm: str = 'HS256'
) -> str:
    """Sign claims into a JWT that expires after lifetime_minutes."""
    to_encode = dict(claims)
    to_encode['exp'] = datetime.now(timezone.utc) + timedelta(minutes=lifetime_minutes)
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = 'HS256') -> Dict[str, Any]:
    """Verify signature and expiry. Raises jose.JWTError on any failure."""
    return jwt.decode(token, secret, algorithms=[algorithm])


def generate_reset_token() -> str:
    return secrets.token_urlsafe(32)


def hash_reset_token(token: str) -> str:
    # only the digest is persisted
    return hashlib.sha256(token.encode('utf-8')).hexdigest()
