# taskflow/api/endpoints/user_logs.py
import math

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskflow.core import errors, security
from taskflow.db import models, session
from taskflow.schemas import token as token_schema
from taskflow.schemas import user_log as log_schema
from taskflow.schemas.envelope import Envelope

router = APIRouter()

@router.get("", response_model=log_schema.UserLogPage)
def get_all_user_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(session.get_db),
    admin: token_schema.TokenData = Depends(security.get_current_admin)
):
    """ Newest-first page of login/logout audit rows. """
    try:
        total = db.query(models.UserLog).count()
        logs = (
            db.query(models.UserLog)
            .order_by(models.UserLog.created_at.desc(), models.UserLog.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error while fetching user logs")

    total_pages = math.ceil(total / limit)
    pagination = log_schema.Pagination(
        current_page=page,
        total_pages=total_pages,
        total_logs=total,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
        limit=limit,
    )
    return log_schema.UserLogPage(
        data=[log_schema.UserLog.model_validate(log) for log in logs], pagination=pagination
    )

@router.delete("/{log_id}", response_model=Envelope[None])
def delete_user_log(
    log_id: int,
    db: Session = Depends(session.get_db),
    admin: token_schema.TokenData = Depends(security.get_current_admin)
):
    log = db.get(models.UserLog, log_id)
    if not log:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User log not found")
    try:
        db.delete(log)
        db.commit()
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error while deleting user log")
    return Envelope(message="User log deleted successfully")
