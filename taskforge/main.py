import random
from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI
from sqlmodel import Session

from taskforge.config import get_settings
from taskforge.database import create_db_and_tables, get_db, session_scope
from taskforge.models.task import Task
from taskforge.models.user import User
from taskforge.models.workspace import Workspace
from taskforge.repository import Repository
from taskforge.schemas import DemoSeedConfig
from taskforge.seeders.demo import seed_demo_data
from taskforge.seeders.roles import bootstrap_roles
from taskforge.utils.logger import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings)
    logger.info("startup_begin")

    # 1. tables
    create_db_and_tables()

    # 2. roles must exist before any membership is written
    with session_scope() as session:
        repo = Repository(session)
        bootstrap_roles(repo)

        # 3. optional demo data
        if settings.seed_on_startup:
            seed_demo_data(repo, DemoSeedConfig.from_settings(settings), rng=random.Random(settings.random_seed))

    logger.info("startup_complete")
    yield
    logger.info("shutdown")


app = FastAPI(
    title="Taskforge",
    description="Synthetic data seeding and identity migration for the task manager",
    version="1.0.0",
    lifespan=lifespan
)


@app.get("/")
def read_root(db: Session = Depends(get_db)):
    repo = Repository(db)
    return {
        "message": "Taskforge is running",
        "status": "Healthy",
        "counts": {
            "users": repo.count(User),
            "workspaces": repo.count(Workspace),
            "tasks": repo.count(Task),
        },
    }
