#!/usr/bin/env python3
"""
Delete employees and all work data, keeping the CEO account.

Activities are kept; their user references are cleared by the database.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.core.database import Database
from app.models import Attendance, Board, BoardList, Card, CardTimeEntry, Task, User, UserRole
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def clean_test_data():
    database = Database(settings.DATABASE_URL)
    db = database.session()
    try:
        counts = {}
        # Children before parents
        for model in (CardTimeEntry, Card, BoardList, Board, Task, Attendance):
            counts[model.__tablename__] = db.query(model).delete(synchronize_session=False)
        counts["employees"] = db.query(User).filter(
            User.role == UserRole.EMPLOYEE.value
        ).delete(synchronize_session=False)
        db.commit()

        for name, count in counts.items():
            logger.info(f"   {name}: {count} deleted")
        logger.info("✅ Test data removed, CEO account kept")
    except Exception as e:
        logger.error(f"❌ Error cleaning data: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    clean_test_data()
