"""
User model definition using SQLAlchemy ORM.
"""

from datetime import timedelta
from typing import Optional

from booktalk import db
from booktalk.core.security import (
    create_access_token,
    generate_reset_token,
    hash_password,
    hash_reset_token,
    verify_password,
)
from booktalk.models.database import new_id, utcnow

ROLES = ('user', 'admin')


class User(db.Model):
    """A registered member of the community."""

    __tablename__ = 'users'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(320), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='user')
    photo = db.Column(db.String(500))
    photo_id = db.Column(db.String(255))
    password_reset_token_hash = db.Column(db.String(64), index=True)
    password_reset_expires_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    def set_password(self, password: str):
        self.password_hash = hash_password(password)

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.password_hash)

    def create_token(self, secret: str, lifetime_minutes: int, algorithm: str = 'HS256') -> str:
        """Issue a signed access token identifying this user."""
        return create_access_token(
            {'userId': self.id, 'name': self.name},
            secret,
            lifetime_minutes,
            algorithm
        )

    def start_password_reset(self, lifetime_minutes: int) -> str:
        """Store a fresh reset token digest and return the plaintext token."""
        token = generate_reset_token()
        self.password_reset_token_hash = hash_reset_token(token)
        self.password_reset_expires_at = utcnow() + timedelta(minutes=lifetime_minutes)
        return token

    def finish_password_reset(self, password: str):
        self.set_password(password)
        self.password_reset_token_hash = None
        self.password_reset_expires_at = None

    @classmethod
    def find_by_email(cls, email: str) -> Optional['User']:
        return cls.query.filter_by(email=email.lower()).first()

    @classmethod
    def find_by_reset_token(cls, token: str) -> Optional['User']:
        """Return the user holding an unexpired reset token, if any."""
        return cls.query.filter(
            cls.password_reset_token_hash == hash_reset_token(token),
            cls.password_reset_expires_at > utcnow()
        ).first()

    def to_dict(self):
        """Public profile; never includes credentials."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'photo': self.photo,
        }
