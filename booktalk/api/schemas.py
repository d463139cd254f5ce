"""
Request validation schemas.

Each Pydantic model describes one request body or query string. Wire names
are camelCase; attributes are snake_case.
"""

from datetime import date, datetime
from typing import Annotated, Any, List, Literal, Optional, Type, TypeVar

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationError,
    field_validator,
    model_validator,
)

from booktalk.core.errors import ValidationFailedError
from booktalk.models.database import ID_PATTERN

SchemaT = TypeVar('SchemaT', bound=BaseModel)


def _record_id(value: str) -> str:
    if not ID_PATTERN.match(value):
        raise ValueError("must be a valid record id")
    return value


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
RecordId = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_record_id)]


class RequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


# Users

class RegisterSchema(RequestSchema):
    name: NonEmptyStr
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginSchema(RequestSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateProfileSchema(RequestSchema):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None


class ProfileQuerySchema(RequestSchema):
    email: Optional[EmailStr] = None


class PasswordResetRequestSchema(RequestSchema):
    email: EmailStr


class PasswordResetSchema(RequestSchema):
    token: NonEmptyStr
    password: str = Field(..., min_length=6)


# Books

class ImageLinksSchema(RequestSchema):
    small_thumbnail: Optional[AnyHttpUrl] = Field(None, alias='smallThumbnail')
    thumbnail: Optional[AnyHttpUrl] = None


class BookSchema(RequestSchema):
    title: NonEmptyStr
    google_id: Optional[str] = Field(None, alias='googleID', min_length=1)
    link: Optional[AnyHttpUrl] = None
    authors: List[str] = Field(..., min_length=1)
    publisher: NonEmptyStr
    description: NonEmptyStr
    published_date: date = Field(..., alias='publishedDate')
    categories: List[str] = Field(..., min_length=1)
    image_links: Optional[ImageLinksSchema] = Field(None, alias='imageLinks')

    @field_validator('authors', 'categories')
    @classmethod
    def no_blank_entries(cls, values: List[str]) -> List[str]:
        cleaned = [v.strip() for v in values]
        if any(not v for v in cleaned):
            raise ValueError("entries cannot be empty")
        return cleaned


class BookQuerySchema(RequestSchema):
    search: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    sort: Optional[Literal['a-z', 'z-a', 'latest', 'oldest']] = None


# Discussions

class DiscussionSchema(RequestSchema):
    title: NonEmptyStr
    book: RecordId
    content: NonEmptyStr
    date: datetime
    meeting_link: AnyHttpUrl = Field(..., alias='meetingLink')


class DiscussionUpdateSchema(RequestSchema):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None
    meeting_link: Optional[AnyHttpUrl] = Field(None, alias='meetingLink')


class DiscussionQuerySchema(RequestSchema):
    search: Optional[str] = None
    sort: Optional[Literal['latest', 'oldest']] = None
    book_id: Optional[RecordId] = Field(None, alias='bookId')


# Comments

class CommentSchema(RequestSchema):
    book: Optional[RecordId] = None
    discussion: Optional[RecordId] = None
    text: NonEmptyStr

    @model_validator(mode='after')
    def single_target(self):
        if (self.book is None) == (self.discussion is None):
            raise ValueError("exactly one of book or discussion is required")
        return self


class CommentQuerySchema(RequestSchema):
    item_id: RecordId = Field(..., alias='itemId')


# Email

class SendEmailSchema(RequestSchema):
    to_email: EmailStr = Field(..., alias='toEmail')
    subject: Optional[str] = None
    text_content: Optional[str] = Field(None, alias='textContent')
    html_content: Optional[str] = Field(None, alias='htmlContent')


def _describe(error: dict) -> str:
    field = '.'.join(str(part) for part in error['loc'])
    message = error['msg']
    if message.startswith('Value error, '):
        message = message[len('Value error, '):]
    return f"{field}: {message}" if field else message


def validate_payload(schema: Type[SchemaT], data: Any) -> SchemaT:
    """Validate data against schema, raising ValidationFailedError on failure."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationFailedError(["Request body must be a JSON object"])
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        raise ValidationFailedError(
            [_describe(err) for err in errors],
            ['.'.join(str(part) for part in err['loc']) for err in errors]
        )
