"""
Accessors for the per-application clients created by create_app.
"""

from flask import current_app

from booktalk.core.config import Settings


def current_settings() -> Settings:
    return current_app.extensions['booktalk.settings']


def current_mailer():
    return current_app.extensions['booktalk.mailer']


def current_photo_store():
    return current_app.extensions['booktalk.photo_store']
