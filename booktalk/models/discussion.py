"""
Discussion model and its participant association table.
"""

from sqlalchemy import delete, func, insert
from sqlalchemy.exc import IntegrityError

from booktalk import db
from booktalk.models.database import new_id, utcnow

# The composite primary key keeps each (discussion, user) pair unique
discussion_participants = db.Table(
    'discussion_participants',
    db.Column('discussion_id', db.String(32), db.ForeignKey('discussions.id', ondelete='CASCADE'), primary_key=True),
    db.Column('user_id', db.String(32), db.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    db.Column('joined_at', db.DateTime, nullable=False, default=utcnow),
)

DISCUSSION_SORTS = {
    'latest': lambda: Discussion.date.desc(),
    'oldest': lambda: Discussion.date.asc(),
}


class Discussion(db.Model):
    """A scheduled meeting about one book."""

    __tablename__ = 'discussions'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(300), nullable=False)
    book_id = db.Column(db.String(32), db.ForeignKey('books.id', ondelete='CASCADE'), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    meeting_link = db.Column(db.String(500), nullable=False)
    created_by = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    book = db.relationship('Book', back_populates='discussions')
    creator = db.relationship('User')
    participants = db.relationship('User', secondary=discussion_participants, order_by=discussion_participants.c.joined_at)
    comments = db.relationship('Comment', back_populates='discussion', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Discussion(id={self.id}, title='{self.title}')>"

    @classmethod
    def filtered(cls, search=None, sort=None, book_id=None):
        query = cls.query
        if book_id:
            query = query.filter(cls.book_id == book_id)
        if search:
            query = query.filter(func.lower(cls.title).contains(search.lower(), autoescape=True))
        order = DISCUSSION_SORTS.get(sort or 'latest', DISCUSSION_SORTS['latest'])
        return query.order_by(order(), cls.created_at.desc())

    def is_owned_by(self, user_id: str) -> bool:
        return self.created_by == user_id

    def add_participant(self, user_id: str) -> bool:
        """Insert the membership row. Returns False if it already existed."""
        try:
            db.session.execute(insert(discussion_participants).values(
                discussion_id=self.id, user_id=user_id, joined_at=utcnow()
            ))
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return False
        db.session.expire(self, ['participants'])
        return True

    def remove_participant(self, user_id: str) -> bool:
        """Delete the membership row. Returns False if there was none."""
        result = db.session.execute(delete(discussion_participants).where(
            discussion_participants.c.discussion_id == self.id,
            discussion_participants.c.user_id == user_id
        ))
        db.session.commit()
        db.session.expire(self, ['participants'])
        return result.rowcount > 0

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'book': self.book_id,
            'content': self.content,
            'date': self.date.isoformat() if self.date else None,
            'meetingLink': self.meeting_link,
            'createdBy': self.created_by,
            'participants': [user.id for user in self.participants],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
