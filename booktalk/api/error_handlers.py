"""
Translate every error raised while handling a request into one JSON response.

Classification order, first match wins:
    1. ValidationFailedError   -> 400, field messages joined by ", "
    2. InvalidIdentifierError  -> 400, names the field and value
    3. DuplicateKeyError       -> 400, names the duplicated fields
    4. APIError                -> its own status code and message
    5. HTTPException           -> its own status code (unknown route, 405, 413)
    6. anything else           -> 500 with a generic message

Body shape: {"error": {"kind": ..., "message": ...}}
"""

import logging
from typing import Any, Dict, Tuple

from flask import jsonify
from werkzeug.exceptions import HTTPException

from booktalk import db
from booktalk.core.errors import (
    APIError,
    DuplicateKeyError,
    InvalidIdentifierError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong. Please try again later."

HTTP_KINDS = {
    400: 'BadRequestError',
    401: 'UnauthenticatedError',
    404: 'NotFoundError',
    405: 'MethodNotAllowedError',
    413: 'PayloadTooLargeError',
}


def error_body(kind: str, message: str) -> Dict[str, Any]:
    return {'error': {'kind': kind, 'message': message}}


def normalize_error(error: Exception) -> Tuple[int, Dict[str, Any]]:
    """Map an exception to (status_code, body)."""
    if isinstance(error, ValidationFailedError):
        return 400, error_body(error.kind, ', '.join(error.messages))

    if isinstance(error, InvalidIdentifierError):
        return 400, error_body(error.kind, str(error))

    if isinstance(error, DuplicateKeyError):
        return 400, error_body(error.kind, str(error))

    if isinstance(error, APIError):
        return error.status_code, error_body(error.kind, error.message)

    if isinstance(error, HTTPException):
        code = error.code or 500
        message = "Not Found" if code == 404 else (error.description or error.name)
        return code, error_body(HTTP_KINDS.get(code, 'HTTPError'), message)

    return 500, error_body('InternalServerError', GENERIC_MESSAGE)


def handle_error(error: Exception):
    status_code, body = normalize_error(error)
    if status_code >= 500:
        logger.error(f"Unhandled error: {error}", exc_info=error)
        # leave the session usable for the next request
        db.session.rollback()
    elif not isinstance(error, HTTPException):
        logger.info(f"{body['error']['kind']}: {body['error']['message']}")
    response = jsonify(body)
    response.status_code = status_code
    return response


def register_error_handlers(app):
    """Route every exception raised by a view through handle_error."""
    app.register_error_handler(Exception, handle_error)
