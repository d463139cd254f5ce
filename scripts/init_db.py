"""
Database initialization script.
This script creates the database tables and loads catalog books from a CSV file.

Expected columns: title, authors, publisher, description, published_date,
categories, google_id, thumbnail. Multi-valued columns use ';' as separator.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

from tqdm import tqdm

# Add the parent directory to the Python path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from booktalk import create_app, db
from booktalk.api.schemas import BookSchema, validate_payload
from booktalk.core.errors import DataError
from booktalk.models import Book
from booktalk.models.database import init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).resolve().parent.parent / 'data' / 'books' / 'data.csv'


def _split(value):
    return [part.strip() for part in (value or '').split(';') if part.strip()]


def row_to_book(row):
    """Validate one CSV row and build an unsaved Book. Raises DataError on bad rows."""
    image_links = {'thumbnail': row['thumbnail']} if row.get('thumbnail') else None
    payload = validate_payload(BookSchema, {
        'title': row.get('title'),
        'googleID': row.get('google_id') or None,
        'authors': _split(row.get('authors')),
        'publisher': row.get('publisher'),
        'description': row.get('description'),
        'publishedDate': row.get('published_date'),
        'categories': _split(row.get('categories')),
        'imageLinks': image_links,
    })
    book = Book(
        title=payload.title,
        google_id=payload.google_id,
        authors=payload.authors,
        publisher=payload.publisher,
        description=payload.description,
        published_date=payload.published_date,
    )
    book.categories.extend(payload.categories)
    if payload.image_links and payload.image_links.thumbnail:
        book.thumbnail = str(payload.image_links.thumbnail)
    return book


def load_books(data_file: Path) -> int:
    """Insert every valid row not already present (by googleID). Returns the insert count."""
    inserted = 0
    with open(data_file, 'r', encoding='utf-8') as f:
        rows = list(csv.DictReader(f))
    for row in tqdm(rows, desc="Loading books", unit="book"):
        try:
            book = row_to_book(row)
        except DataError as e:
            logger.error(f"Skipping row: {row.get('title', 'Unknown')}. Error: {e}")
            continue
        if book.google_id and Book.query.filter_by(google_id=book.google_id).first():
            logger.info(f"Book already present: {book.title}")
            continue
        db.session.add(book)
        inserted += 1
    db.session.commit()
    return inserted


def main():
    parser = argparse.ArgumentParser(description="Create tables and load catalog books.")
    parser.add_argument('--data-file', type=Path, default=DEFAULT_DATA_FILE)
    parser.add_argument('--drop', action='store_true', help='drop existing tables first')
    args = parser.parse_args()

    app = create_app()
    try:
        with app.app_context():
            if args.drop:
                db.drop_all()
                logger.info("Dropped existing tables")
            init_db()
            logger.info("Database tables created successfully")

            if not args.data_file.exists():
                logger.warning(f"Data file not found: {args.data_file}")
                return
            inserted = load_books(args.data_file)
            logger.info(f"Initial data loaded successfully ({inserted} books)")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise


if __name__ == '__main__':
    main()
