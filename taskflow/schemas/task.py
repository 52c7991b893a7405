# taskflow/schemas/task.py
from pydantic import StringConstraints, field_validator
from typing import Annotated, List, Literal, Optional
from datetime import date, datetime

from taskflow.schemas.envelope import CamelModel, Envelope

TaskStatus = Literal["incomplete", "complete"]
TaskPriority = Literal["low", "medium", "high"]
SortField = Literal["createdAt", "updatedAt", "dueDate", "title", "priority", "status"]
SortOrder = Literal["asc", "desc"]

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class TaskCreate(CamelModel):
    title: Title
    description: Description
    due_date: date
    status: TaskStatus = "incomplete"
    priority: TaskPriority = "medium"

class TaskUpdate(CamelModel):
    title: Optional[Title] = None
    description: Optional[Description] = None
    due_date: Optional[date] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None

    @field_validator("title", "description", "due_date", "status", "priority")
    @classmethod
    def reject_null(cls, value):
        # Only runs for fields present in the payload.
        if value is None:
            raise ValueError("may not be null")
        return value

class Task(CamelModel):
    id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: date
    user_id: int
    created_at: datetime
    updated_at: datetime

class TaskList(Envelope[List[Task]]):
    count: int
