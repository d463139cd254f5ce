"""
Comment model and its like association table.
"""

from sqlalchemy import delete, func, insert, or_, select
from sqlalchemy.exc import IntegrityError

from booktalk import db
from booktalk.models.database import new_id, utcnow

comment_likes = db.Table(
    'comment_likes',
    db.Column('comment_id', db.String(32), db.ForeignKey('comments.id', ondelete='CASCADE'), primary_key=True),
    db.Column('user_id', db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    db.Column('liked_at', db.DateTime, nullable=False, default=utcnow),
)


class Comment(db.Model):
    """A comment on exactly one book or one discussion."""

    __tablename__ = 'comments'
    __table_args__ = (
        db.CheckConstraint(
            '(book_id IS NULL) != (discussion_id IS NULL)',
            name='ck_comments_single_target'
        ),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    user_id = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=False, index=True)
    book_id = db.Column(db.String(32), db.ForeignKey('books.id', ondelete='CASCADE'), index=True)
    discussion_id = db.Column(db.String(32), db.ForeignKey('discussions.id', ondelete='CASCADE'), index=True)
    text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    author = db.relationship('User')
    book = db.relationship('Book', back_populates='comments')
    discussion = db.relationship('Discussion', back_populates='comments')
    likers = db.relationship('User', secondary=comment_likes, order_by=comment_likes.c.liked_at)

    def __repr__(self):
        return f"<Comment(id={self.id}, user_id={self.user_id})>"

    @classmethod
    def for_item(cls, item_id: str):
        """Comments on a book or discussion, newest first."""
        return cls.query.filter(
            or_(cls.book_id == item_id, cls.discussion_id == item_id)
        ).order_by(cls.created_at.desc())

    def like_count(self) -> int:
        return db.session.scalar(
            select(func.count()).select_from(comment_likes).where(comment_likes.c.comment_id == self.id)
        )

    def toggle_like(self, user_id: str) -> bool:
        """Remove the caller's like if present, otherwise add it.

        Returns True when the comment ends up liked by user_id.
        """
        removed = db.session.execute(delete(comment_likes).where(
            comment_likes.c.comment_id == self.id,
            comment_likes.c.user_id == user_id
        )).rowcount
        if removed:
            db.session.commit()
            db.session.expire(self, ['likers'])
            return False
        try:
            db.session.execute(insert(comment_likes).values(
                comment_id=self.id, user_id=user_id, liked_at=utcnow()
            ))
            db.session.commit()
        except IntegrityError:
            # a concurrent request from the same user inserted first
            db.session.rollback()
        db.session.expire(self, ['likers'])
        return True

    def to_dict(self):
        likes = [user.id for user in self.likers]
        return {
            'id': self.id,
            'user': self.user_id,
            'book': self.book_id,
            'discussion': self.discussion_id,
            'text': self.text,
            'likes': likes,
            'likeCount': len(likes),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
