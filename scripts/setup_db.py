"""
Database setup script: creates tables and optionally promotes admins.

Usage:
    python scripts/setup_db.py [--admin EMAIL ...]
"""

import argparse
import logging
import sys
from pathlib import Path

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Add the parent directory to the Python path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from booktalk import create_app, db
from booktalk.models import User
from booktalk.models.database import init_db


def promote_admins(emails):
    """Give the admin role to each registered email; unknown emails are reported."""
    promoted = 0
    for email in emails:
        user = User.find_by_email(email)
        if user is None:
            logger.warning(f"No user registered with {email}")
            continue
        user.role = 'admin'
        promoted += 1
        logger.info(f"Promoted {email} to admin")
    db.session.commit()
    return promoted


def setup_database(admins=()):
    """Set up the database tables"""
    app = create_app()

    with app.app_context():
        logger.info("Creating database tables...")
        init_db()
        if admins:
            promote_admins(admins)

    logger.info("Database setup completed successfully!")


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('--admin', action='append', default=[], metavar='EMAIL',
                        help='promote a registered user to admin (repeatable)')
    args = parser.parse_args()
    try:
        setup_database(args.admin)
    except Exception as e:
        logger.error(f"Setup failed: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
