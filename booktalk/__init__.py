"""
Flask application package.
"""

import logging
import logging.config
import time

from flask import Flask, g, request
from flask_sqlalchemy import SQLAlchemy

from booktalk.core.config import API_PREFIX, Settings, build_logging_config

db = SQLAlchemy()

logger = logging.getLogger(__name__)
access_logger = logging.getLogger('booktalk.access')


def create_app(settings: Settings = None, mailer=None, photo_store=None):
    """Build the application.

    The mail and photo clients are created once here and shared by every
    request through app.extensions; tests pass their own doubles.
    """
    if settings is None:
        settings = Settings.from_env()

    logging.config.dictConfig(build_logging_config(settings.log_level))

    app = Flask(__name__)

    # Configure the Flask application
    app.config['SQLALCHEMY_DATABASE_URI'] = settings.database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SQLALCHEMY_ECHO'] = settings.sql_echo
    app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_bytes
    app.config['TESTING'] = settings.testing

    # Initialize extensions
    db.init_app(app)

    from booktalk.services import CloudinaryPhotoStore, MailjetMailer
    app.extensions['booktalk.settings'] = settings
    app.extensions['booktalk.mailer'] = mailer if mailer is not None else MailjetMailer(settings.mailjet)
    app.extensions['booktalk.photo_store'] = (
        photo_store if photo_store is not None else CloudinaryPhotoStore(settings.cloudinary)
    )

    from booktalk.api.error_handlers import register_error_handlers
    from booktalk.api.rate_limit import RateLimiter, register_rate_limiter
    register_error_handlers(app)
    if settings.rate_limit_requests > 0:
        register_rate_limiter(app, RateLimiter(settings.rate_limit_requests, settings.rate_limit_window_seconds))

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.get('request_started')
        elapsed = (time.perf_counter() - started) * 1000 if started else 0.0
        access_logger.info(f"{request.method} {request.path} {response.status_code} {elapsed:.1f}ms")
        return response

    # Register blueprints
    from booktalk.api.routes.main_routes import main_bp
    from booktalk.api.routes.user_routes import auth_bp
    from booktalk.api.routes.book_routes import books_bp
    from booktalk.api.routes.discussion_routes import discussions_bp
    from booktalk.api.routes.comment_routes import comments_bp
    from booktalk.api.routes.photo_routes import photo_bp
    from booktalk.api.routes.email_routes import email_bp

    app.register_blueprint(main_bp, url_prefix=API_PREFIX)
    app.register_blueprint(auth_bp, url_prefix=f'{API_PREFIX}/auth')
    app.register_blueprint(books_bp, url_prefix=f'{API_PREFIX}/books')
    app.register_blueprint(discussions_bp, url_prefix=f'{API_PREFIX}/discussions')
    app.register_blueprint(comments_bp, url_prefix=f'{API_PREFIX}/comments')
    app.register_blueprint(photo_bp, url_prefix=f'{API_PREFIX}/photo')
    app.register_blueprint(email_bp, url_prefix=f'{API_PREFIX}/email')

    logger.info(f"Application created with {len(app.blueprints)} blueprints")
    return app
