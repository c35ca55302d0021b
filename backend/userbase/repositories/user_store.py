from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from userbase.core.errors import ConstraintViolation, InvalidArgument, StorageFailure
from userbase.models.user import User
from userbase.schemas.user import UserPublic

logger = logging.getLogger(__name__)

# Columns that are safe to hand out - everything except password_hash
PUBLIC_COLUMNS = (User.id, User.name, User.email, User.created_at, User.updated_at)

# Fields a partial update may touch
UPDATABLE_FIELDS = ("name", "email")


@contextmanager
def storage_errors(db: Session, action: str):
    """Roll back and translate SQLAlchemy errors raised inside the block"""
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        raise ConstraintViolation(f"Constraint violated while trying to {action}") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Storage error while trying to {action}")
        raise StorageFailure() from e


class UserStore:
    """Data access for the users table"""

    @staticmethod
    def list(db: Session) -> List[UserPublic]:
        with storage_errors(db, "list users"):
            rows = db.execute(select(*PUBLIC_COLUMNS).order_by(User.id)).all()
        return [UserPublic.model_validate(row) for row in rows]

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[UserPublic]:
        with storage_errors(db, "fetch user"):
            row = db.execute(select(*PUBLIC_COLUMNS).where(User.id == user_id)).first()
        return UserPublic.model_validate(row) if row else None

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        """
        Full record including password_hash.
        Only the authentication path may use this.
        """
        with storage_errors(db, "fetch user by email"):
            return db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    @staticmethod
    def find_by_name_substring(db: Session, fragment: str) -> List[UserPublic]:
        """
        Case-insensitive "contains" match on name.
        % and _ in the fragment are matched literally.
        """
        stmt = (
            select(*PUBLIC_COLUMNS)
            .where(func.lower(User.name).contains(fragment.lower(), autoescape=True))
            .order_by(User.id)
        )
        with storage_errors(db, "search users"):
            rows = db.execute(stmt).all()
        return [UserPublic.model_validate(row) for row in rows]

    @staticmethod
    def exists_by_email(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(User.id).where(User.email == email)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        with storage_errors(db, "check email"):
            return db.execute(stmt.limit(1)).first() is not None

    @staticmethod
    def insert(db: Session, name: str, email: str, password_hash: str, created_at: datetime) -> int:
        """Insert a user and return the new id"""
        db_user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )
        with storage_errors(db, "insert user"):
            db.add(db_user)
            db.flush()
            new_id = db_user.id
            db.commit()
        return new_id

    @staticmethod
    def update_fields(db: Session, user_id: int, fields: Dict[str, Any]) -> int:
        """
        Apply a partial update and return the number of rows affected.

        Only fields present with a non-None value are written, in a single
        parameterized UPDATE. An unknown id affects 0 rows.
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise InvalidArgument(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        changes = {key: value for key, value in fields.items() if value is not None}
        if not changes:
            raise InvalidArgument("No fields to update")

        stmt = update(User).where(User.id == user_id).values(**changes)
        with storage_errors(db, "update user"):
            result = db.execute(stmt)
            db.commit()
        return result.rowcount

    @staticmethod
    def delete(db: Session, user_id: int) -> int:
        with storage_errors(db, "delete user"):
            result = db.execute(delete(User).where(User.id == user_id))
            db.commit()
        return result.rowcount


user_store = UserStore()
