from enum import Enum
from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class ProviderEnum(str, Enum):
    EMAIL = "EMAIL"
    GOOGLE = "GOOGLE"
    GITHUB = "GITHUB"
    FACEBOOK = "FACEBOOK"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: Optional[str] = None
    name: str
    profile_image: Optional[str] = None

    # last workspace the user switched to
    current_workspace_id: Optional[int] = Field(default=None, index=True)

    created_at: datetime = Field(default_factory=datetime.now)


# login method linked to a user; for EMAIL the provider_id mirrors User.email
class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    provider: ProviderEnum = Field(default=ProviderEnum.EMAIL, index=True)
    provider_id: str = Field(index=True)
    created_at: datetime = Field(default_factory=datetime.now)
