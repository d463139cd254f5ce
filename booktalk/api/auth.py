"""
Bearer-token authentication for protected routes.
"""

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional

from flask import g, request
from jose import JWTError

from booktalk.api.context import current_settings
from booktalk.core.errors import APIError, UnauthenticatedError
from booktalk.core.security import decode_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller attached to the request context"""
    user_id: str
    name: Optional[str] = None


def authenticate_request() -> Identity:
    """Verify the request's bearer token and return the caller's identity.

    Raises UnauthenticatedError (or a generic 401 APIError for an empty
    token) without touching the database.
    """
    auth_header = request.headers.get('Authorization')
    if not auth_header or not auth_header.startswith('Bearer '):
        raise UnauthenticatedError("Authentication token missing or invalid")

    token = auth_header.split(' ', 1)[1].strip()
    if not token:
        raise APIError("Authentication token missing", 401)

    settings = current_settings()
    try:
        payload = decode_access_token(token, settings.jwt_secret, settings.jwt_algorithm)
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        raise UnauthenticatedError("Authentication invalid")

    user_id = payload.get('userId')
    if not user_id:
        raise UnauthenticatedError("Invalid token")

    return Identity(user_id=str(user_id), name=payload.get('name'))


def login_required(f: Callable) -> Callable:
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.identity = authenticate_request()
        return f(*args, **kwargs)
    return decorated_function


def current_identity() -> Identity:
    identity = g.get('identity')
    if identity is None:
        raise UnauthenticatedError("User is not authenticated")
    return identity
