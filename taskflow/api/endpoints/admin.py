# taskflow/api/endpoints/admin.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

from taskflow.core import errors, security
from taskflow.db import models, session
from taskflow.schemas import token as token_schema
from taskflow.schemas import user as user_schema
from taskflow.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

router = APIRouter()

def get_user_by_email(db: Session, email: str) -> models.User:
    db_user = db.query(models.User).filter(models.User.email == email.strip().lower()).first()
    if not db_user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return db_user

def to_schema(users) -> List[user_schema.User]:
    return [user_schema.User.model_validate(user) for user in users]

# --- API Endpoints ---

@router.post("/create-admin", response_model=Envelope[user_schema.User], status_code=status.HTTP_201_CREATED)
def create_admin(
    admin_in: user_schema.AdminCreate,
    db: Session = Depends(session.get_db),
    admin: token_schema.TokenData = Depends(security.get_current_admin)
):
    """ Creates another admin account. Only existing admins can do this. """
    if db.query(models.User).filter(models.User.email == admin_in.email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    try:
        db_user = models.User(
            full_name=admin_in.full_name, email=admin_in.email,
            hashed_password=security.get_password_hash(admin_in.password), role="admin",
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error while creating admin")

    logger.info("Admin %s created admin %s", admin.user_id, db_user.id)
    return Envelope(message="Admin created successfully", data=user_schema.User.model_validate(db_user))

@router.get("/admins", response_model=Envelope[List[user_schema.User]])
def get_all_admins(
    db: Session = Depends(session.get_db),
    admin: token_schema.TokenData = Depends(security.get_current_admin)
):
    admins = db.query(models.User).filter(models.User.role == "admin").order_by(models.User.id).all()
    return Envelope(data=to_schema(admins))

@router.get("/stats", response_model=Envelope[user_schema.UserStats])
def get_stats(
    db: Session = Depends(session.get_db),
    admin: token_schema.TokenData = Depends(security.get_current_admin)
):
    """ Head counts for the admin dashboard. """
    total_users = db.query(models.User).filter(models.User.role == "user").count()
    total_admins = db.query(models.User).filter(models.User.role == "admin").count()
    stats = user_schema.UserStats(
        total_users=total_users, total_admins=total_admins, total_all_users=total_users + total_admins
    )
    return Envelope(data=stats)

@router.get("/users", response_model=Envelope[List[user_schema.User]])
def get_all_users(
    db: Session = Depends(session.get_db),
    admin: token_schema.TokenData = Depends(security.get_current_admin)
):
    """ Retrieves a list of all users. """
    return Envelope(data=to_schema(db.query(models.User).order_by(models.User.id).all()))

@router.put("/users/{email}", response_model=Envelope[user_schema.User])
def update_user_details(
    email: str,
    updates: user_schema.UserUpdate,
    db: Session = Depends(session.get_db),
    admin: token_schema.TokenData = Depends(security.get_current_admin)
):
    """ Updates a user's name or role. """
    db_user = get_user_by_email(db, email)

    update_data = updates.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_user, field, value)

    try:
        db.commit()
        db.refresh(db_user)
    except SQLAlchemyError:
        raise errors.server_error(db, "Failed to update user")
    return Envelope(message="User updated successfully", data=user_schema.User.model_validate(db_user))

@router.delete("/users/{email}", response_model=Envelope[None])
def remove_user(
    email: str,
    db: Session = Depends(session.get_db),
    admin: token_schema.TokenData = Depends(security.get_current_admin)
):
    """ Deletes a user together with their tasks. Audit rows are kept. """
    db_user = get_user_by_email(db, email)
    try:
        db.delete(db_user)
        db.commit()
    except SQLAlchemyError:
        raise errors.server_error(db, "Failed to delete user")

    logger.info("Admin %s deleted user %s", admin.user_id, email)
    return Envelope(message="User deleted successfully")
