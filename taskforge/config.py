"""Settings loaded from environment variables (or a local .env file)."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(default="sqlite:///./taskforge.db")
    database_echo: bool = Field(default=False)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")

    # Startup
    seed_on_startup: bool = Field(default=False)

    # Demo dataset
    seed_demo_count: int = Field(default=100)

    # Multi-tenant dataset
    seed_users: int = Field(default=20)
    seed_workspaces_per_user_min: int = Field(default=1)
    seed_workspaces_per_user_max: int = Field(default=2)
    seed_members_per_workspace_min: int = Field(default=2)
    seed_members_per_workspace_max: int = Field(default=5)
    seed_projects_per_workspace_min: int = Field(default=3)
    seed_projects_per_workspace_max: int = Field(default=6)
    seed_tasks_total: int = Field(default=1000)
    seed_assigned_ratio: float = Field(default=0.6)
    seed_due_date_ratio: float = Field(default=0.7)
    seed_fixtures_dir: str = Field(default="fixtures")

    # Identities
    seed_default_password: str = Field(default="Passw0rd!")
    canonical_email_domain: str = Field(default="gmail.com")

    # Fixed seed for reproducible runs; unset means a fresh random source
    random_seed: Optional[int] = Field(default=None)


@lru_cache
def get_settings() -> Settings:
    return Settings()
