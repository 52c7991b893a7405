# taskflow/api/endpoints/tasks.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional

from taskflow.core import errors, security
from taskflow.db import models, session
from taskflow.schemas import task as task_schema
from taskflow.schemas import token as token_schema
from taskflow.schemas.envelope import Envelope

router = APIRouter()

SORT_COLUMNS = {
    "createdAt": models.Task.created_at,
    "updatedAt": models.Task.updated_at,
    "dueDate": models.Task.due_date,
    "title": models.Task.title,
    "priority": models.Task.priority,
    "status": models.Task.status,
}

def get_owned_task(db: Session, task_id: int, user_id: int) -> models.Task:
    """Looks a task up by id *and* owner, so other users' tasks read as missing."""
    task = db.query(models.Task).filter(models.Task.id == task_id, models.Task.user_id == user_id).first()
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task

@router.get("", response_model=task_schema.TaskList)
def list_tasks(
    status_filter: Optional[task_schema.TaskStatus] = Query(None, alias="status"),
    priority: Optional[task_schema.TaskPriority] = None,
    sort_by: task_schema.SortField = Query("createdAt", alias="sortBy"),
    order: task_schema.SortOrder = "desc",
    db: Session = Depends(session.get_db),
    current: token_schema.TokenData = Depends(security.get_current_token),
):
    """ Lists the caller's tasks, optionally filtered by status/priority. """
    try:
        query = db.query(models.Task).filter(models.Task.user_id == current.user_id)
        if status_filter:
            query = query.filter(models.Task.status == status_filter)
        if priority:
            query = query.filter(models.Task.priority == priority)

        column = SORT_COLUMNS[sort_by]
        direction = column.asc() if order == "asc" else column.desc()
        tasks = query.order_by(direction, models.Task.id.asc() if order == "asc" else models.Task.id.desc()).all()
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error while fetching tasks")

    return task_schema.TaskList(count=len(tasks), data=[task_schema.Task.model_validate(task) for task in tasks])

@router.post("", response_model=Envelope[task_schema.Task], status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: task_schema.TaskCreate,
    db: Session = Depends(session.get_db),
    current: token_schema.TokenData = Depends(security.get_current_token),
):
    try:
        task = models.Task(**task_in.model_dump(), user_id=current.user_id)
        db.add(task)
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error while creating task")
    return Envelope(message="Task created successfully", data=task_schema.Task.model_validate(task))

@router.put("/{task_id}", response_model=Envelope[task_schema.Task])
def update_task(
    task_id: int,
    updates: task_schema.TaskUpdate,
    db: Session = Depends(session.get_db),
    current: token_schema.TokenData = Depends(security.get_current_token),
):
    """ Merges the supplied fields into the task; anything omitted is left alone. """
    task = get_owned_task(db, task_id, current.user_id)

    update_data = updates.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(task, field, value)

    try:
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error while updating task")
    return Envelope(message="Task updated successfully", data=task_schema.Task.model_validate(task))

@router.patch("/{task_id}/toggle", response_model=Envelope[task_schema.Task])
def toggle_task_status(
    task_id: int,
    db: Session = Depends(session.get_db),
    current: token_schema.TokenData = Depends(security.get_current_token),
):
    task = get_owned_task(db, task_id, current.user_id)
    task.status = "incomplete" if task.status == "complete" else "complete"
    try:
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error while updating task status")
    return Envelope(message="Task status updated successfully", data=task_schema.Task.model_validate(task))

@router.delete("/{task_id}", response_model=Envelope[None])
def delete_task(
    task_id: int,
    db: Session = Depends(session.get_db),
    current: token_schema.TokenData = Depends(security.get_current_token),
):
    task = get_owned_task(db, task_id, current.user_id)
    try:
        db.delete(task)
        db.commit()
    except SQLAlchemyError:
        raise errors.server_error(db, "Server error while deleting task")
    return Envelope(message="Task deleted successfully")
