"""
Avatar and book cover upload routes.
"""

import logging

from flask import Blueprint, jsonify, request

from booktalk import db
from booktalk.api.auth import current_identity, login_required
from booktalk.api.context import current_photo_store
from booktalk.core.errors import BadRequestError, NotFoundError, PhotoStorageError
from booktalk.models import Book, User
from booktalk.models.database import commit, get_or_404

logger = logging.getLogger(__name__)

photo_bp = Blueprint('photo', __name__)

AVATAR_SIZE = (150, 150)
COVER_SIZE = (1200, 1800)


def _uploaded_file():
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise BadRequestError("file is required")
    content = upload.read()
    if not content:
        raise BadRequestError("file is empty")
    return upload.filename, content


def _discard_previous(public_id):
    """Remove a replaced image; failure leaves an orphan on the host and is only logged."""
    if not public_id:
        return
    try:
        current_photo_store().delete(public_id)
    except PhotoStorageError as e:
        logger.warning(f"Could not remove replaced image {public_id}: {e}")


def _upload_response(message, uploaded):
    return jsonify({
        'message': message,
        'imageUrl': uploaded.secure_url,
        'optimizedUrl': uploaded.optimized_url,
        'autoCroppedUrl': uploaded.auto_crop_url,
    })


@photo_bp.route('/avatar', methods=['POST'])
@login_required
def upload_avatar():
    filename, content = _uploaded_file()
    user = db.session.get(User, current_identity().user_id)
    if user is None:
        raise NotFoundError("User not found")

    width, height = AVATAR_SIZE
    uploaded = current_photo_store().upload(content, filename, 'avatars', width, height, prefix='avatar')
    previous = user.photo_id
    user.photo_id = uploaded.public_id
    user.photo = uploaded.auto_crop_url
    commit()
    _discard_previous(previous)

    return _upload_response("Avatar uploaded successfully!", uploaded)


@photo_bp.route('/avatar', methods=['DELETE'])
@login_required
def delete_avatar():
    user = db.session.get(User, current_identity().user_id)
    if user is None:
        raise NotFoundError("The user was not found")
    if not user.photo_id:
        raise BadRequestError("No photo to delete")

    current_photo_store().delete(user.photo_id)
    user.photo = None
    user.photo_id = None
    commit()
    return jsonify({'message': "Photo deleted successfully!"})


@photo_bp.route('/cover', methods=['POST'])
@login_required
def upload_cover():
    book_id = request.form.get('bookId')
    if not book_id:
        raise BadRequestError("bookId is required")
    filename, content = _uploaded_file()
    book = get_or_404(Book, book_id, 'bookId', 'book')

    width, height = COVER_SIZE
    uploaded = current_photo_store().upload(content, filename, 'covers', width, height, prefix='cover')
    previous = book.cover_id
    book.cover_id = uploaded.public_id
    book.thumbnail = uploaded.auto_crop_url
    book.small_thumbnail = uploaded.optimized_url
    commit()
    _discard_previous(previous)

    return _upload_response("Book cover uploaded successfully!", uploaded)


@photo_bp.route('/cover/<book_id>', methods=['DELETE'])
@login_required
def delete_cover(book_id):
    book = get_or_404(Book, book_id, 'bookId', 'book')
    if not book.cover_id:
        raise NotFoundError("No cover to delete for this book")

    current_photo_store().delete(book.cover_id)
    book.cover_id = None
    book.thumbnail = None
    book.small_thumbnail = None
    commit()
    return jsonify({'message': "Book cover deleted successfully!"})
