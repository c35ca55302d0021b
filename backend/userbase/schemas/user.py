from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_serializer

NonEmptyName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _as_utc_isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    # SQLite drops the offset; every timestamp is written in UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class UserCreate(BaseModel):
    name: NonEmptyName
    email: EmailStr
    password: str = Field(min_length=6)


class UserUpdate(BaseModel):
    name: Optional[NonEmptyName] = None
    email: Optional[EmailStr] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserPublic(BaseModel):
    """User projection returned by every read path (no password hash)"""
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at')
    def serialize_created_at(self, value: datetime, _info):
        return _as_utc_isoformat(value)

    @field_serializer('updated_at')
    def serialize_updated_at(self, value: Optional[datetime], _info):
        return _as_utc_isoformat(value)
