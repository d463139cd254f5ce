"""
Development server entry point.
"""

import logging
import sys

from booktalk import create_app
from booktalk.core.config import Settings
from booktalk.models.database import init_db

logger = logging.getLogger(__name__)


def main():
    try:
        settings = Settings.from_env()
    except ValueError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    app = create_app(settings)
    with app.app_context():
        init_db()

    logger.info(f"Server is listening on port {settings.port}")
    app.run(host='0.0.0.0', port=settings.port)


if __name__ == '__main__':
    main()
