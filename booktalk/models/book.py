"""
Book model definition using SQLAlchemy ORM.
"""

from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.ext.associationproxy import association_proxy
from sqlalchemy.ext.orderinglist import ordering_list

from booktalk import db
from booktalk.models.database import new_id, utcnow

BOOK_SORTS = {
    'a-z': lambda: Book.title.asc(),
    'z-a': lambda: Book.title.desc(),
    'latest': lambda: Book.published_date.desc(),
    'oldest': lambda: Book.published_date.asc(),
}


def main_category(category: str) -> str:
    """Portion of a hierarchical category before its first '/'."""
    return category.split('/')[0].strip()


class BookCategory(db.Model):
    """One entry of a book's ordered category list."""

    __tablename__ = 'book_categories'

    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.String(32), db.ForeignKey('books.id', ondelete='CASCADE'), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False, default=0)
    name = db.Column(db.String(200), nullable=False, index=True)


class Book(db.Model):
    """Book model representing a catalog entry."""

    __tablename__ = 'books'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(500), nullable=False)
    google_id = db.Column(db.String(64), unique=True)
    link = db.Column(db.String(500))
    authors = db.Column(db.JSON, nullable=False, default=list)
    publisher = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=False)
    published_date = db.Column(db.Date, nullable=False)
    small_thumbnail = db.Column(db.String(500))
    thumbnail = db.Column(db.String(500))
    cover_id = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    category_rows = db.relationship(
        'BookCategory',
        order_by='BookCategory.position',
        collection_class=ordering_list('position'),
        cascade='all, delete-orphan'
    )
    categories = association_proxy('category_rows', 'name', creator=lambda name: BookCategory(name=name))

    discussions = db.relationship('Discussion', back_populates='book', cascade='all, delete-orphan')
    comments = db.relationship('Comment', back_populates='book', cascade='all, delete-orphan')

    def __repr__(self):
        """String representation of the book."""
        return f"<Book(id={self.id}, title='{self.title}')>"

    @classmethod
    def filtered(
        cls,
        search: Optional[str] = None,
        categories: Optional[Iterable[str]] = None,
        sort: Optional[str] = None
    ):
        """Build the catalog query.

        search is a case-insensitive substring match on the title. Each
        requested category is reduced to its main category and matched as a
        case-sensitive prefix of any stored category; requests are OR-ed.
        """
        query = cls.query
        if search:
            query = query.filter(func.lower(cls.title).contains(search.lower(), autoescape=True))
        prefixes = [main_category(c) for c in categories or [] if c.strip()]
        if prefixes:
            query = query.filter(cls.category_rows.any(or_(*[
                func.substr(BookCategory.name, 1, len(prefix)) == prefix for prefix in prefixes
            ])))
        order = BOOK_SORTS.get(sort or 'latest', BOOK_SORTS['latest'])
        return query.order_by(order(), cls.created_at.desc())

    @staticmethod
    def main_categories() -> List[str]:
        """Distinct main categories across the catalog, sorted."""
        names = db.session.query(BookCategory.name).distinct()
        return sorted({main_category(name) for (name,) in names})

    def to_dict(self):
        """Convert book to dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'googleID': self.google_id,
            'link': self.link,
            'authors': list(self.authors or []),
            'publisher': self.publisher,
            'description': self.description,
            'publishedDate': self.published_date.isoformat() if self.published_date else None,
            'categories': list(self.categories),
            'imageLinks': {
                'smallThumbnail': self.small_thumbnail,
                'thumbnail': self.thumbnail,
                'bookCoverId': self.cover_id,
            },
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
