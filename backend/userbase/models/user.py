from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from userbase.core.database import Base


class User(Base):
    """
    User record.

    The password is stored only as a bcrypt hash and never leaves the
    store/service layer; read paths select the public columns only.
    """
    __tablename__ = "users"
    # AUTOINCREMENT keeps SQLite from reusing ids of deleted rows
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # Email is unique and indexed for fast lookups during login
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    # created_at is supplied by the service when the row is inserted
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
