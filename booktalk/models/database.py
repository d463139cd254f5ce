"""
Database helpers shared by the models and controllers.

This module is the only place that inspects SQLAlchemy errors; everything it
raises is one of the tagged variants in booktalk.core.errors.
"""

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError

from booktalk import db
from booktalk.core.errors import DuplicateKeyError, InvalidIdentifierError, NotFoundError

logger = logging.getLogger(__name__)

ID_PATTERN = re.compile(r'^[0-9a-f]{32}$')

# sqlite: "UNIQUE constraint failed: users.email"
_SQLITE_UNIQUE = re.compile(r'UNIQUE constraint failed: ([\w., ]+)')
# postgres: "Key (email)=(ann@x.com) already exists."
_POSTGRES_UNIQUE = re.compile(r'Key \(([^)]+)\)=')

ModelT = TypeVar('ModelT')


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    # naive UTC, sqlite drops tzinfo
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def init_db():
    """Initialize the database, creating all tables"""
    from booktalk import models  # noqa: F401  register mappers
    db.create_all()


def parse_id(value, field: str) -> str:
    """Return value if it is a well-formed record id, else raise InvalidIdentifierError."""
    if not isinstance(value, str) or not ID_PATTERN.match(value):
        raise InvalidIdentifierError(field, value)
    return value


def get_or_404(model: Type[ModelT], record_id: str, field: str, label: Optional[str] = None) -> ModelT:
    """Load a record by id, raising InvalidIdentifierError or NotFoundError."""
    parse_id(record_id, field)
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFoundError(f"No {label or model.__name__.lower()} with id {record_id}")
    return record


def duplicate_fields(error: IntegrityError) -> List[str]:
    """Extract the column names named by a uniqueness violation."""
    message = str(error.orig)
    match = _SQLITE_UNIQUE.search(message)
    if match:
        return [part.strip().split('.')[-1] for part in match.group(1).split(',')]
    match = _POSTGRES_UNIQUE.search(message)
    if match:
        return [part.strip() for part in match.group(1).split(',')]
    return []


def commit():
    """Commit the session, translating uniqueness violations into DuplicateKeyError."""
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        fields = duplicate_fields(e)
        if not fields:
            raise
        logger.info(f"Integrity violation on commit: {fields}")
        raise DuplicateKeyError(fields) from e
