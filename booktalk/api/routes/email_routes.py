"""
Transactional email route.
"""

from flask import Blueprint, jsonify, request

from booktalk.api.context import current_mailer
from booktalk.api.schemas import SendEmailSchema, validate_payload
from booktalk.services.mailer import DEFAULT_HTML, DEFAULT_SUBJECT

email_bp = Blueprint('email', __name__)


@email_bp.route('', methods=['POST'])
def send_email():
    payload = validate_payload(SendEmailSchema, request.get_json(silent=True))

    result = current_mailer().send(
        payload.to_email,
        payload.subject or DEFAULT_SUBJECT,
        text_content=payload.text_content or '',
        html_content=payload.html_content or DEFAULT_HTML,
    )
    return jsonify({'message': "Email sent successfully", 'data': result})
