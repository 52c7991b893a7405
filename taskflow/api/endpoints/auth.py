# taskflow/api/endpoints/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskflow.core import errors, security
from taskflow.db import models, session
from taskflow.schemas import token as token_schema
from taskflow.schemas import user as user_schema
from taskflow.schemas.envelope import Envelope
from taskflow.services import audit

logger = logging.getLogger(__name__)

router = APIRouter()

def auth_data(user: models.User, token: str) -> user_schema.AuthData:
    return user_schema.AuthData(token=token, role=user.role, user_id=user.id, full_name=user.full_name)

@router.post("/register", response_model=Envelope[user_schema.AuthData], status_code=status.HTTP_201_CREATED)
def register(user_in: user_schema.UserCreate, db: Session = Depends(session.get_db)):
    """ Creates an account and hands back a token for it straight away. """
    if db.query(models.User).filter(models.User.email == user_in.email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    try:
        user = models.User(
            full_name=user_in.full_name, email=user_in.email,
            hashed_password=security.get_password_hash(user_in.password), role="user",
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error during registration")

    logger.info("Registered user %s with role %s", user.id, user.role)
    token = security.create_access_token(user.id, user.role)
    return Envelope(message="User registered successfully", data=auth_data(user, token))

@router.post("/login", response_model=Envelope[user_schema.AuthData])
def login(credentials: user_schema.LoginRequest, request: Request, db: Session = Depends(session.get_db)):
    user = db.query(models.User).filter(models.User.email == credentials.email).first()
    if not user or not security.verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password")

    token = security.create_access_token(user.id, user.role)
    # Best effort; the login stands even if the audit row is lost.
    audit.log_user_login(db, user, token, request)
    return Envelope(message="Login successful", data=auth_data(user, token))

@router.post("/logout", response_model=Envelope[None])
def logout(
    request: Request,
    db: Session = Depends(session.get_db),
    current: token_schema.TokenData = Depends(security.get_current_token),
):
    audit.log_user_logout(db, current.user_id, current.token, request)
    return Envelope(message="Logged out successfully")
