# taskflow/services/audit.py
import logging

from fastapi import Request
from sqlalchemy.orm import Session

from taskflow.core import security
from taskflow.db import models

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

def get_client_ip(request: Request) -> str:
    """Best guess at the caller's address, honouring the usual proxy headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    ip = (
        request.headers.get("x-real-ip")
        or (forwarded_for.split(",")[0].strip() if forwarded_for else None)
        or (request.client.host if request.client else None)
        or UNKNOWN
    )
    return ip.removeprefix("::ffff:")

def get_user_agent(request: Request) -> str:
    return request.headers.get("user-agent") or UNKNOWN

def session_minutes(login_time, logout_time) -> int:
    elapsed = models.as_utc(logout_time) - models.as_utc(login_time)
    return round(elapsed.total_seconds() / 60)

def log_user_login(db: Session, user: models.User, token: str, request: Request) -> models.UserLog | None:
    """
    Appends a login row. Never raises: a failed write is logged and the caller
    carries on as if nothing happened.
    """
    user_id = user.id
    try:
        entry = models.UserLog(
            user_id=user.id,
            user_name=user.full_name,
            user_email=user.email,
            role=user.role,
            action="login",
            login_time=models.utcnow(),
            token_id=security.get_token_id(token),
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request),
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry
    except Exception:
        db.rollback()
        logger.warning("Could not record login for user %s", user_id, exc_info=True)
        return None

def find_login_for(db: Session, user_id: int, token_id: str) -> models.UserLog | None:
    return (
        db.query(models.UserLog)
        .filter(
            models.UserLog.user_id == user_id,
            models.UserLog.token_id == token_id,
            models.UserLog.action == "login",
        )
        .order_by(models.UserLog.created_at.desc(), models.UserLog.id.desc())
        .first()
    )

def log_user_logout(db: Session, user_id: int, token: str, request: Request) -> models.UserLog | None:
    """
    Appends a logout row, pairing it with the newest login that carries the same
    token id to work out how long the session lasted. Never raises.
    """
    try:
        user = db.get(models.User, user_id)
        if user is None:
            logger.info("Skipping logout log, user %s no longer exists", user_id)
            return None

        token_id = security.get_token_id(token)
        logout_time = models.utcnow()
        login_entry = find_login_for(db, user_id, token_id)
        duration = None
        if login_entry is not None and login_entry.login_time is not None:
            duration = session_minutes(login_entry.login_time, logout_time)

        entry = models.UserLog(
            user_id=user.id,
            user_name=user.full_name,
            user_email=user.email,
            role=user.role,
            action="logout",
            logout_time=logout_time,
            token_id=token_id,
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request),
            session_duration=duration,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry
    except Exception:
        db.rollback()
        logger.warning("Could not record logout for user %s", user_id, exc_info=True)
        return None
