from enum import Enum
from typing import Optional, List
from datetime import datetime
from sqlalchemy import Column, JSON, UniqueConstraint
from sqlmodel import SQLModel, Field


class RoleName(str, Enum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


# 1. Role (created once at bootstrap, shared by reference)
class Role(SQLModel, table=True):
    __tablename__ = "roles"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: RoleName = Field(unique=True, index=True)
    permissions: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


# 2. Workspace (tenant)
class Workspace(SQLModel, table=True):
    __tablename__ = "workspaces"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: Optional[str] = None
    owner_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=datetime.now)


# 3. Workspace member (N:M between users and workspaces)
class WorkspaceMember(SQLModel, table=True):
    __tablename__ = "workspace_members"
    __table_args__ = (UniqueConstraint("user_id", "workspace_id", name="uq_member_user_workspace"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    workspace_id: int = Field(foreign_key="workspaces.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    role_id: int = Field(foreign_key="roles.id")
    joined_at: datetime = Field(default_factory=datetime.now)


# 4. Project (unit of work inside a workspace)
class Project(SQLModel, table=True):
    __tablename__ = "projects"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    emoji: Optional[str] = None
    workspace_id: int = Field(foreign_key="workspaces.id", index=True)
    created_by_id: int = Field(foreign_key="users.id")
    created_at: datetime = Field(default_factory=datetime.now)
