from pydantic import BaseModel, EmailStr, Field, model_validator
from datetime import datetime
from typing import Optional, List

from taskforge.config import Settings
from taskforge.models.task import TaskPriority, TaskStatus
from taskforge.utils.names import EMAIL_DOMAIN


# run configuration for the single-tenant demo dataset
class DemoSeedConfig(BaseModel):
    task_count: int = Field(default=100, ge=0)
    assigned_ratio: float = Field(default=0.3, ge=0, le=1)
    due_date_ratio: float = Field(default=0.7, ge=0, le=1)
    due_days_min: int = 0
    due_days_max: int = 59
    password: str = "Passw0rd!"
    email_domain: str = EMAIL_DOMAIN

    @model_validator(mode="after")
    def check_ranges(self):
        if self.due_days_min > self.due_days_max:
            raise ValueError("due_days_min must not exceed due_days_max")
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "DemoSeedConfig":
        # 0 falls back to the default count
        return cls(
            task_count=settings.seed_demo_count or 100,
            password=settings.seed_default_password,
            email_domain=settings.canonical_email_domain,
        )


# run configuration for the multi-tenant stress dataset
class MultiTenantSeedConfig(BaseModel):
    users: int = Field(default=20, ge=0)
    workspaces_per_user_min: int = Field(default=1, ge=0)
    workspaces_per_user_max: int = Field(default=2, ge=0)
    members_per_workspace_min: int = Field(default=2, ge=0)
    members_per_workspace_max: int = Field(default=5, ge=0)
    projects_per_workspace_min: int = Field(default=3, ge=0)
    projects_per_workspace_max: int = Field(default=6, ge=0)
    tasks_total: int = Field(default=1000, ge=0)
    assigned_ratio: float = Field(default=0.6, ge=0, le=1)
    due_date_ratio: float = Field(default=0.7, ge=0, le=1)
    due_days_min: int = -30
    due_days_max: int = 90
    password: str = "Passw0rd!"
    email_domain: str = EMAIL_DOMAIN

    @model_validator(mode="after")
    def check_ranges(self):
        for prefix in ("workspaces_per_user", "members_per_workspace", "projects_per_workspace", "due_days"):
            if getattr(self, f"{prefix}_min") > getattr(self, f"{prefix}_max"):
                raise ValueError(f"{prefix}_min must not exceed {prefix}_max")
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "MultiTenantSeedConfig":
        return cls(
            users=settings.seed_users,
            workspaces_per_user_min=settings.seed_workspaces_per_user_min,
            workspaces_per_user_max=settings.seed_workspaces_per_user_max,
            members_per_workspace_min=settings.seed_members_per_workspace_min,
            members_per_workspace_max=settings.seed_members_per_workspace_max,
            projects_per_workspace_min=settings.seed_projects_per_workspace_min,
            projects_per_workspace_max=settings.seed_projects_per_workspace_max,
            tasks_total=settings.seed_tasks_total,
            assigned_ratio=settings.seed_assigned_ratio,
            due_date_ratio=settings.seed_due_date_ratio,
            password=settings.seed_default_password,
            email_domain=settings.canonical_email_domain,
        )


# task record handed to the bulk materializer
class TaskDraft(BaseModel):
    task_code: str
    title: str
    description: Optional[str] = None
    project_id: int
    workspace_id: int
    status: TaskStatus
    priority: TaskPriority
    assigned_to_id: Optional[int] = None
    created_by_id: int
    due_date: Optional[datetime] = None


class SeedReport(BaseModel):
    dataset: str
    skipped: bool = False
    reason: Optional[str] = None
    users: int = 0
    workspaces: int = 0
    members: int = 0
    projects: int = 0
    tasks: int = 0
    fixtures_dir: Optional[str] = None


class IdentityChange(BaseModel):
    user_id: int
    old_name: Optional[str] = None
    new_name: Optional[str] = None
    old_email: Optional[str] = None
    new_email: Optional[str] = None

    @property
    def email_changed(self) -> bool:
        return self.old_email != self.new_email


class MigrationReport(BaseModel):
    candidates: int = 0
    changes: List[IdentityChange] = []

    @property
    def changed(self) -> int:
        return len(self.changes)


# fixture export shapes
class UserFixture(BaseModel):
    id: int
    email: EmailStr
    name: str
    current_workspace_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class WorkspaceFixture(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    owner_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectFixture(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    emoji: Optional[str] = None
    workspace_id: int
    created_by_id: int

    class Config:
        from_attributes = True


class TaskFixture(BaseModel):
    id: int
    task_code: str
    title: str
    description: Optional[str] = None
    project_id: int
    workspace_id: int
    status: TaskStatus
    priority: TaskPriority
    assigned_to_id: Optional[int] = None
    created_by_id: int
    due_date: Optional[datetime] = None

    class Config:
        from_attributes = True
