"""
ORM models. Importing this package registers every mapper.
"""

from .user import User
from .book import Book, BookCategory
from .discussion import Discussion, discussion_participants
from .comment import Comment, comment_likes

__all__ = ['User', 'Book', 'BookCategory', 'Discussion', 'discussion_participants', 'Comment', 'comment_likes']
