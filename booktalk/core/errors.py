"""
Error types raised by controllers, services and the data layer.

Domain errors carry their own HTTP status. Data-layer errors are a closed set
of tagged variants; the error handlers map each variant to a status code.
"""

from typing import Iterable, List


class APIError(Exception):
    """Base class for errors that carry an HTTP status code"""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    @property
    def kind(self) -> str:
        return type(self).__name__


class BadRequestError(APIError):
    status_code = 400


class NotFoundError(APIError):
    status_code = 404


class UnauthenticatedError(APIError):
    status_code = 401


class RateLimitError(APIError):
    status_code = 429


class EmailDeliveryError(APIError):
    """Raised when the email provider rejects or fails a send"""
    status_code = 502


class PhotoStorageError(APIError):
    """Raised when the image host rejects or fails an upload or delete"""
    status_code = 502


class DataError(Exception):
    """Base class for errors produced by the data layer"""

    kind = 'DataError'


class ValidationFailedError(DataError):
    """Request or document shape did not match its schema"""

    kind = 'ValidationError'

    def __init__(self, messages: Iterable[str], fields: Iterable[str] = ()):
        self.messages: List[str] = list(messages)
        self.fields: List[str] = list(fields)
        super().__init__(', '.join(self.messages))


class InvalidIdentifierError(DataError):
    """A record reference was not a well-formed identifier"""

    kind = 'InvalidIdentifierError'

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for {field}: {value}")


class DuplicateKeyError(DataError):
    """A write violated a uniqueness constraint"""

    kind = 'DuplicateKeyError'

    def __init__(self, fields: Iterable[str]):
        self.fields: List[str] = list(fields)
        super().__init__(f"Duplicate field value entered for {', '.join(self.fields) or 'unique field'}")
