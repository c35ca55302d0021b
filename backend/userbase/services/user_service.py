from datetime import datetime, timezone
from typing import List, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from userbase.core.errors import (
    AuthFailed,
    ConstraintViolation,
    DuplicateEmail,
    InvalidArgument,
    NotFound,
)
from userbase.core.security import dummy_verify, get_password_hash, verify_password
from userbase.repositories.user_store import user_store
from userbase.schemas.user import UserPublic

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


def _not_found(user_id: int) -> NotFound:
    return NotFound(f"No user found with ID {user_id}")


class UserService:
    """Business rules for the user lifecycle on top of the user store"""

    @staticmethod
    def list_users(db: Session) -> Tuple[List[UserPublic], int]:
        users = user_store.list(db)
        return users, len(users)

    @staticmethod
    def get_user(db: Session, user_id: int) -> UserPublic:
        user = user_store.get_by_id(db, user_id)
        if user is None:
            raise _not_found(user_id)
        return user

    @staticmethod
    def create_user(db: Session, name: str, email: str, password: str) -> UserPublic:
        """
        Create a user and return its public projection.

        The email check gives a fast rejection; the unique constraint in the
        store catches concurrent registrations that slip past it.
        """
        if user_store.exists_by_email(db, email):
            raise DuplicateEmail()

        password_hash = get_password_hash(password)
        try:
            user_id = user_store.insert(
                db,
                name=name,
                email=email,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
        except ConstraintViolation:
            raise DuplicateEmail()

        logger.info(f"User created successfully with ID: {user_id}")
        return user_store.get_by_id(db, user_id)

    @staticmethod
    def update_user(
        db: Session,
        user_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserPublic:
        """Partially update name and/or email"""
        if name is None and email is None:
            raise InvalidArgument("At least one field (name or email) must be provided")

        if user_store.get_by_id(db, user_id) is None:
            raise _not_found(user_id)

        if email is not None and user_store.exists_by_email(db, email, exclude_id=user_id):
            raise DuplicateEmail()

        try:
            rows = user_store.update_fields(db, user_id, {"name": name, "email": email})
        except ConstraintViolation:
            raise DuplicateEmail()

        # Row vanished between the existence check and the update
        if rows == 0:
            raise _not_found(user_id)

        return user_store.get_by_id(db, user_id)

    @staticmethod
    def delete_user(db: Session, user_id: int) -> None:
        if user_store.delete(db, user_id) == 0:
            raise _not_found(user_id)
        logger.info(f"User {user_id} deleted successfully")

    @staticmethod
    def search_users(db: Session, fragment: Optional[str]) -> Tuple[List[UserPublic], int, str]:
        """
        Case-insensitive substring search on name.

        Returns (matches, count, trimmed search term).
        """
        term = (fragment or "").strip()
        if not term:
            raise InvalidArgument("Please provide a name parameter to search")
        if len(term) < MIN_SEARCH_LENGTH:
            raise InvalidArgument(f"Search term must be at least {MIN_SEARCH_LENGTH} characters long")

        users = user_store.find_by_name_substring(db, term)
        return users, len(users), term

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> UserPublic:
        """
        Check credentials and return the public projection.

        Unknown email and wrong password raise the same AuthFailed so callers
        cannot tell which emails are registered.
        """
        user = user_store.get_by_email(db, email)
        if user is None:
            dummy_verify()
            raise AuthFailed()
        if not verify_password(password, user.password_hash):
            raise AuthFailed()
        return UserPublic.model_validate(user)


user_service = UserService()
