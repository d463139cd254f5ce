"""
Registration, login, profile and password-reset routes.
"""

import logging

from flask import Blueprint, jsonify, request

from booktalk import db
from booktalk.api.auth import current_identity, login_required
from booktalk.api.context import current_mailer, current_settings
from booktalk.api.schemas import (
    LoginSchema,
    PasswordResetRequestSchema,
    PasswordResetSchema,
    ProfileQuerySchema,
    RegisterSchema,
    UpdateProfileSchema,
    validate_payload,
)
from booktalk.core.errors import (
    BadRequestError,
    DuplicateKeyError,
    EmailDeliveryError,
    NotFoundError,
    UnauthenticatedError,
)
from booktalk.models import User
from booktalk.models.database import commit

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

INVALID_CREDENTIALS = "Invalid Credentials"


def _token_response(user: User, status_code: int):
    settings = current_settings()
    token = user.create_token(settings.jwt_secret, settings.jwt_lifetime_minutes, settings.jwt_algorithm)
    return jsonify({'user': {'name': user.name}, 'token': token}), status_code


@auth_bp.route('/register', methods=['POST'])
def register():
    payload = validate_payload(RegisterSchema, request.get_json(silent=True))

    user = User(name=payload.name, email=payload.email.lower())
    user.set_password(payload.password)
    db.session.add(user)
    try:
        commit()
    except DuplicateKeyError:
        raise UnauthenticatedError("User with this email already exist")

    logger.info(f"Registered user {user.id}")
    return _token_response(user, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    payload = validate_payload(LoginSchema, request.get_json(silent=True))

    user = User.find_by_email(payload.email)
    # Same rejection for unknown email and wrong password
    if user is None or not user.check_password(payload.password):
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    return _token_response(user, 200)


@auth_bp.route('/profile', methods=['GET'])
@login_required
def get_profile():
    """Return the caller's profile, or the profile matching ?email="""
    query = validate_payload(ProfileQuerySchema, request.args.to_dict())

    if query.email:
        user = User.find_by_email(query.email)
        if user is None:
            raise NotFoundError("The user with such email was not found")
    else:
        user = db.session.get(User, current_identity().user_id)
        if user is None:
            raise NotFoundError("User not found")

    return jsonify({'user': user.to_dict()})


@auth_bp.route('/profile', methods=['POST'])
@login_required
def update_profile():
    payload = validate_payload(UpdateProfileSchema, request.get_json(silent=True))

    user = db.session.get(User, current_identity().user_id)
    if user is None:
        raise NotFoundError("User not found")

    if payload.name is not None:
        user.name = payload.name
    if payload.email is not None:
        user.email = payload.email.lower()
    try:
        commit()
    except DuplicateKeyError:
        raise BadRequestError("A user with this email already exists")

    return jsonify({'user': user.to_dict()})


@auth_bp.route('/request', methods=['POST'])
def request_password_reset():
    """Email a reset token. Responds identically whether or not the email is registered or delivered."""
    payload = validate_payload(PasswordResetRequestSchema, request.get_json(silent=True))
    settings = current_settings()

    user = User.find_by_email(payload.email)
    if user is not None:
        token = user.start_password_reset(settings.password_reset_minutes)
        commit()
        text = (
            f"Hi {user.name}, use this token to reset your password: {token}\n"
            f"It expires in {settings.password_reset_minutes} minutes."
        )
        try:
            current_mailer().send(user.email, "Reset your password", text_content=text)
        except EmailDeliveryError as e:
            # same response as for an unknown email
            logger.error(f"Password reset email to {user.email} failed: {e}")
    else:
        logger.info("Password reset requested for unknown email")

    return jsonify({'message': "If the email is registered, a reset token has been sent"})


@auth_bp.route('/reset', methods=['POST'])
def reset_password():
    payload = validate_payload(PasswordResetSchema, request.get_json(silent=True))

    user = User.find_by_reset_token(payload.token)
    if user is None:
        raise BadRequestError("Invalid or expired reset token")

    user.finish_password_reset(payload.password)
    commit()
    logger.info(f"Password reset for user {user.id}")
    return jsonify({'message': "Password has been reset"})
