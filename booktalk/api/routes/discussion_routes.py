"""
Discussion routes: CRUD plus join and unjoin.
"""

import logging

from flask import Blueprint, jsonify, request

from booktalk import db
from booktalk.api.auth import current_identity, login_required
from booktalk.api.context import current_mailer
from booktalk.api.schemas import (
    DiscussionQuerySchema,
    DiscussionSchema,
    DiscussionUpdateSchema,
    validate_payload,
)
from booktalk.core.errors import BadRequestError, NotFoundError, UnauthenticatedError
from booktalk.models import Book, Discussion, User
from booktalk.models.database import commit, get_or_404, to_naive_utc
from booktalk.services import notify_participation

logger = logging.getLogger(__name__)

discussions_bp = Blueprint('discussions', __name__)


def _owned_discussion(discussion_id: str, action: str) -> Discussion:
    discussion = get_or_404(Discussion, discussion_id, 'discussionId', 'discussion')
    if not discussion.is_owned_by(current_identity().user_id):
        raise UnauthenticatedError(f"You are not authorized to {action} this discussion")
    return discussion


def _acting_user() -> User:
    user = db.session.get(User, current_identity().user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@discussions_bp.route('', methods=['GET'])
def list_discussions():
    query = validate_payload(DiscussionQuerySchema, request.args.to_dict())
    discussions = Discussion.filtered(query.search, query.sort, query.book_id).all()
    return jsonify({'discussions': [d.to_dict() for d in discussions], 'count': len(discussions)})


@discussions_bp.route('/<discussion_id>', methods=['GET'])
def get_discussion(discussion_id):
    discussion = get_or_404(Discussion, discussion_id, 'discussionId', 'discussion')
    return jsonify({'discussion': discussion.to_dict()})


@discussions_bp.route('', methods=['POST'])
@login_required
def create_discussion():
    payload = validate_payload(DiscussionSchema, request.get_json(silent=True))
    get_or_404(Book, payload.book, 'book', 'book')

    discussion = Discussion(
        title=payload.title,
        book_id=payload.book,
        content=payload.content,
        date=to_naive_utc(payload.date),
        meeting_link=str(payload.meeting_link),
        created_by=current_identity().user_id,
    )
    db.session.add(discussion)
    commit()

    logger.info(f"Created discussion {discussion.id} on book {discussion.book_id}")
    return jsonify({'discussion': discussion.to_dict()}), 201


@discussions_bp.route('/<discussion_id>', methods=['PATCH'])
@login_required
def update_discussion(discussion_id):
    payload = validate_payload(DiscussionUpdateSchema, request.get_json(silent=True))
    discussion = _owned_discussion(discussion_id, 'update')

    if payload.title is not None:
        discussion.title = payload.title
    if payload.content is not None:
        discussion.content = payload.content
    if payload.date is not None:
        discussion.date = to_naive_utc(payload.date)
    if payload.meeting_link is not None:
        discussion.meeting_link = str(payload.meeting_link)
    commit()

    return jsonify({'discussion': discussion.to_dict()})


@discussions_bp.route('/<discussion_id>', methods=['DELETE'])
@login_required
def delete_discussion(discussion_id):
    discussion = _owned_discussion(discussion_id, 'delete')
    db.session.delete(discussion)
    commit()
    logger.info(f"Deleted discussion {discussion_id}")
    return jsonify({'message': "Discussion was successfully deleted"})


@discussions_bp.route('/<discussion_id>/join', methods=['POST'])
@login_required
def join_discussion(discussion_id):
    discussion = get_or_404(Discussion, discussion_id, 'discussionId', 'discussion')
    user = _acting_user()

    if not discussion.add_participant(user.id):
        raise BadRequestError("You are already a participant")

    notify_participation(current_mailer(), user, discussion, joined=True)
    return jsonify({'discussion': discussion.to_dict()})


@discussions_bp.route('/<discussion_id>/unjoin', methods=['POST'])
@login_required
def unjoin_discussion(discussion_id):
    discussion = get_or_404(Discussion, discussion_id, 'discussionId', 'discussion')
    user = _acting_user()

    if not discussion.remove_participant(user.id):
        raise BadRequestError("You are not a participant in this discussion")

    notify_participation(current_mailer(), user, discussion, joined=False)
    return jsonify({'discussion': discussion.to_dict()})
