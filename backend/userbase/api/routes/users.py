from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from userbase.api import responses
from userbase.api.dependencies import valid_user_id
from userbase.core.database import get_db
from userbase.schemas.user import LoginRequest, UserCreate, UserUpdate
from userbase.services.user_service import user_service

router = APIRouter(tags=["users"])

# Handlers are plain functions: FastAPI runs them in its thread pool, so
# blocking database I/O and bcrypt don't stall the event loop


@router.get("/users")
def list_users(db: Session = Depends(get_db)):
    """List all users"""
    users, count = user_service.list_users(db)
    return responses.success({"data": users, "count": count})


# Declared before /users/{user_id} so "search" is not taken for an id
@router.get("/users/search")
def search_users(
    name: Optional[str] = Query(None, description="Name fragment, at least 2 characters"),
    db: Session = Depends(get_db)
):
    """Case-insensitive substring search on name"""
    users, count, term = user_service.search_users(db, name)
    return responses.success({"data": users, "count": count, "searchTerm": term})


@router.get("/users/{user_id}")
def get_user(user_id: int = Depends(valid_user_id), db: Session = Depends(get_db)):
    """Get a user by id"""
    user = user_service.get_user(db, user_id)
    return responses.success({"data": user})


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a new user"""
    user = user_service.create_user(db, user_data.name, user_data.email, user_data.password)
    return responses.created({"message": "User created successfully", "data": user})


@router.put("/users/{user_id}")
def update_user(
    user_update: UserUpdate,
    user_id: int = Depends(valid_user_id),
    db: Session = Depends(get_db)
):
    """Update name and/or email"""
    user = user_service.update_user(db, user_id, name=user_update.name, email=user_update.email)
    return responses.success({"message": "User updated successfully", "data": user})


@router.delete("/users/{user_id}")
def delete_user(user_id: int = Depends(valid_user_id), db: Session = Depends(get_db)):
    """Delete a user permanently"""
    user_service.delete_user(db, user_id)
    return responses.success({"message": "User deleted successfully"})


@router.post("/login")
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Check email and password; returns the public user fields"""
    user = user_service.authenticate(db, credentials.email, credentials.password)
    return responses.success({"message": "Login successful", "data": user})
