"""
Core configuration settings for the application.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

API_PREFIX = '/api/v1'


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ValueError(f"{name} environment variable is not set")
    return value


@dataclass
class MailjetSettings:
    """Credentials and sender identity for the Mailjet send API"""
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    sender_email: str = ''
    sender_name: str = 'Book Talk'
    base_url: str = 'https://api.mailjet.com/v3.1'
    timeout: int = 30

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_secret)


@dataclass
class CloudinarySettings:
    """Credentials for the Cloudinary upload API"""
    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    timeout: int = 30

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass
class Settings:
    """Application settings, read once at process start"""
    database_url: str
    jwt_secret: str
    jwt_lifetime_minutes: int = 60 * 24 * 30
    jwt_algorithm: str = 'HS256'
    password_reset_minutes: int = 60
    port: int = 8000
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60
    max_upload_bytes: int = 10 * 1024 * 1024
    log_level: str = 'INFO'
    sql_echo: bool = False
    testing: bool = False
    mailjet: MailjetSettings = field(default_factory=MailjetSettings)
    cloudinary: CloudinarySettings = field(default_factory=CloudinarySettings)

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables.

        DATABASE_URL and JWT_SECRET are required; a missing value raises
        ValueError so the process fails at startup.
        """
        return cls(
            database_url=_require('DATABASE_URL'),
            jwt_secret=_require('JWT_SECRET'),
            jwt_lifetime_minutes=int(os.getenv('JWT_LIFETIME_MINUTES', 60 * 24 * 30)),
            password_reset_minutes=int(os.getenv('PASSWORD_RESET_MINUTES', 60)),
            port=int(os.getenv('PORT', 8000)),
            rate_limit_requests=int(os.getenv('RATE_LIMIT_REQUESTS', 100)),
            rate_limit_window_seconds=int(os.getenv('RATE_LIMIT_WINDOW_SECONDS', 15 * 60)),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            sql_echo=os.getenv('SQL_ECHO', 'False').lower() == 'true',
            mailjet=MailjetSettings(
                api_key=os.getenv('MAILJET_API_KEY'),
                api_secret=os.getenv('MAILJET_API_SECRET'),
                sender_email=os.getenv('EMAIL', ''),
            ),
            cloudinary=CloudinarySettings(
                cloud_name=os.getenv('CLOUDINARY_CLOUD_NAME'),
                api_key=os.getenv('CLOUDINARY_API_KEY'),
                api_secret=os.getenv('CLOUDINARY_API_SECRET'),
            ),
        )


def build_logging_config(level: str = 'INFO') -> dict:
    """Logging configuration passed to logging.config.dictConfig"""
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s][%(name)s:%(lineno)d] %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'detailed': {
                'format': '%(asctime)s [%(levelname)s][%(name)s:%(funcName)s:%(lineno)d] %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': {
            'console': {
                'level': 'DEBUG',
                'formatter': 'standard',
                'class': 'logging.StreamHandler',
                'stream': 'ext://sys.stdout'
            }
        },
        'loggers': {
            '': {
                'handlers': ['console'],
                'level': level,
                'propagate': True
            },
            'booktalk': {
                'handlers': ['console'],
                'level': level,
                'propagate': False
            },
            'booktalk.access': {
                'handlers': ['console'],
                'level': 'INFO',
                'propagate': False
            },
            'sqlalchemy': {'level': 'WARNING'},
            'werkzeug': {'level': 'WARNING'},
            'urllib3': {'level': 'WARNING'}
        }
    }
