"""
Book catalog routes.
"""

import logging

from flask import Blueprint, jsonify, request

from booktalk import db
from booktalk.api.auth import current_identity, login_required
from booktalk.api.schemas import BookQuerySchema, BookSchema, validate_payload
from booktalk.core.errors import BadRequestError, DuplicateKeyError, UnauthenticatedError
from booktalk.models import Book, User
from booktalk.models.database import commit, get_or_404

logger = logging.getLogger(__name__)

books_bp = Blueprint('books', __name__)


def _requested_categories():
    """Categories from ?categories=a,b and/or repeated ?categories= params."""
    return [
        part
        for value in request.args.getlist('categories')
        for part in value.split(',')
        if part.strip()
    ]


@books_bp.route('', methods=['GET'])
def list_books():
    query = validate_payload(BookQuerySchema, {
        'search': request.args.get('search'),
        'categories': _requested_categories(),
        'sort': request.args.get('sort'),
    })
    books = Book.filtered(query.search, query.categories, query.sort).all()
    return jsonify({'books': [book.to_dict() for book in books], 'count': len(books)})


@books_bp.route('/categories', methods=['GET'])
def list_categories():
    return jsonify({'categories': Book.main_categories()})


@books_bp.route('/<book_id>', methods=['GET'])
def get_book(book_id):
    book = get_or_404(Book, book_id, 'bookId', 'book')
    return jsonify({'book': book.to_dict()})


@books_bp.route('', methods=['POST'])
@login_required
def create_book():
    payload = validate_payload(BookSchema, request.get_json(silent=True))

    book = Book(
        title=payload.title,
        google_id=payload.google_id,
        link=str(payload.link) if payload.link else None,
        authors=payload.authors,
        publisher=payload.publisher,
        description=payload.description,
        published_date=payload.published_date,
    )
    book.categories.extend(payload.categories)
    if payload.image_links:
        if payload.image_links.small_thumbnail:
            book.small_thumbnail = str(payload.image_links.small_thumbnail)
        if payload.image_links.thumbnail:
            book.thumbnail = str(payload.image_links.thumbnail)

    db.session.add(book)
    try:
        commit()
    except DuplicateKeyError as e:
        if 'google_id' in e.fields:
            raise BadRequestError("A book with this googleID already exists")
        raise

    logger.info(f"Created book {book.id} by user {current_identity().user_id}")
    return jsonify({'book': book.to_dict()}), 201


@books_bp.route('/<book_id>', methods=['DELETE'])
@login_required
def delete_book(book_id):
    """Delete a book together with its discussions and comments. Admin only."""
    book = get_or_404(Book, book_id, 'bookId', 'book')

    user = db.session.get(User, current_identity().user_id)
    if user is None or not user.is_admin:
        raise UnauthenticatedError("You are not authorized to delete this book")

    db.session.delete(book)
    commit()
    logger.info(f"Deleted book {book_id}")
    return jsonify({'message': "Book was successfully deleted"})
