"""
Comment routes: create, list, delete and like toggle.
"""

import logging

from flask import Blueprint, jsonify, request

from booktalk import db
from booktalk.api.auth import current_identity, login_required
from booktalk.api.schemas import CommentQuerySchema, CommentSchema, validate_payload
from booktalk.core.errors import NotFoundError, UnauthenticatedError
from booktalk.models import Book, Comment, Discussion, User
from booktalk.models.database import commit, get_or_404, parse_id

logger = logging.getLogger(__name__)

comments_bp = Blueprint('comments', __name__)


@comments_bp.route('', methods=['GET'])
def list_comments():
    query = validate_payload(CommentQuerySchema, request.args.to_dict())
    comments = Comment.for_item(query.item_id).all()
    return jsonify({'comments': [c.to_dict() for c in comments], 'count': len(comments)})


@comments_bp.route('', methods=['POST'])
@login_required
def create_comment():
    payload = validate_payload(CommentSchema, request.get_json(silent=True))
    if payload.book:
        get_or_404(Book, payload.book, 'book', 'book')
    else:
        get_or_404(Discussion, payload.discussion, 'discussion', 'discussion')

    comment = Comment(
        user_id=current_identity().user_id,
        book_id=payload.book,
        discussion_id=payload.discussion,
        text=payload.text,
    )
    db.session.add(comment)
    commit()

    return jsonify({'comment': comment.to_dict()}), 201


def _find_comment(comment_id: str) -> Comment:
    parse_id(comment_id, 'commentId')
    comment = db.session.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment was not found.")
    return comment


@comments_bp.route('/<comment_id>', methods=['DELETE'])
@login_required
def delete_comment(comment_id):
    """Delete a comment. Allowed for its author and for admins."""
    comment = _find_comment(comment_id)
    user_id = current_identity().user_id

    if comment.user_id != user_id:
        user = db.session.get(User, user_id)
        if user is None or not user.is_admin:
            raise UnauthenticatedError("User is not authorized to delete this comment")

    db.session.delete(comment)
    commit()
    return jsonify({'message': "Comment was successfully deleted"})


@comments_bp.route('/<comment_id>/like', methods=['POST'])
@login_required
def like_comment(comment_id):
    comment = _find_comment(comment_id)

    liked = comment.toggle_like(current_identity().user_id)
    message = "You liked the comment!" if liked else "Your like has been removed!"
    return jsonify({'message': message, 'liked': liked, 'likeCount': comment.like_count()})
