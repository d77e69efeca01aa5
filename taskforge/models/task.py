from enum import Enum
from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class TaskStatus(str, Enum):
    BACKLOG = "BACKLOG"
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Task(SQLModel, table=True):
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    task_code: str = Field(unique=True, index=True)
    title: str
    description: Optional[str] = None

    project_id: int = Field(foreign_key="projects.id", index=True)
    workspace_id: int = Field(foreign_key="workspaces.id", index=True)

    status: TaskStatus = Field(default=TaskStatus.TODO)
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM)

    assigned_to_id: Optional[int] = Field(default=None, foreign_key="users.id")
    created_by_id: int = Field(foreign_key="users.id")

    due_date: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.now)
