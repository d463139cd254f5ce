"""
Main routes for the application
"""

import logging

from flask import Blueprint, jsonify
from sqlalchemy import text

from booktalk import db

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)


@main_bp.route('/', methods=['GET'])
def index():
    return jsonify({'data': "This is a full stack app!"})


@main_bp.route('/health', methods=['GET'])
def health_check():
    """Check that the database answers a trivial query"""
    try:
        db.session.execute(text('SELECT 1'))
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        db.session.rollback()
        return jsonify({'status': 'unhealthy', 'database': 'unavailable'}), 503
    return jsonify({'status': 'healthy', 'database': 'ok'})
