"""
Create the users table and seed it with sample accounts.

Run with `userbase-init-db` (or `python -m userbase.scripts.init_db`).
Existing emails are left untouched, so the script can be re-run safely.
"""
import logging

from sqlalchemy.orm import Session

from userbase.core.config import settings
from userbase.core.database import Database
from userbase.core.errors import DuplicateEmail
from userbase.core.logging_config import configure_logging
from userbase.services.user_service import user_service

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    ("John Doe", "john@example.com", "password123"),
    ("Jane Smith", "jane@example.com", "secret456"),
    ("Bob Johnson", "bob@example.com", "qwerty789"),
]


def seed_sample_users(db: Session) -> int:
    """Insert the sample users that don't exist yet; returns how many were added"""
    added = 0
    for name, email, password in SAMPLE_USERS:
        try:
            user = user_service.create_user(db, name, email, password)
        except DuplicateEmail:
            logger.info(f"User {name} already exists")
            continue
        logger.info(f"User {name} created with ID: {user.id}")
        added += 1
    return added


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL).open()
    try:
        database.create_all()
        logger.info("Users table ready")
        db = database.session()
        try:
            seed_sample_users(db)
        finally:
            db.close()
        logger.info("Database initialized with sample data")
        for _, email, password in SAMPLE_USERS:
            logger.info(f"- {email} / {password}")
    finally:
        database.close()


if __name__ == "__main__":
    main()
