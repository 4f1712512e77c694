#!/usr/bin/env python3
"""
Create the CEO account from CEO_NAME / CEO_EMAIL / CEO_PASSWORD settings.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.core.database import Database
from app.services.user_service import user_service
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_ceo():
    """Create tables if needed and seed the CEO account."""
    database = Database(settings.DATABASE_URL)
    database.create_all()

    db = database.session()
    try:
        ceo = user_service.seed_ceo(db, settings)
        if ceo is None:
            logger.error("❌ Set CEO_EMAIL and CEO_PASSWORD before running this script")
            sys.exit(1)
        logger.info(f"✅ CEO account ready: {ceo.email}")
    except Exception as e:
        logger.error(f"❌ Error creating CEO: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    create_ceo()
