from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine

from taskforge.config import get_settings

# register tables on SQLModel.metadata
from taskforge.models import user, workspace, task  # noqa: F401


@lru_cache
def get_engine(url: str = "", echo: bool = False) -> Engine:
    settings = get_settings()
    url = url or settings.database_url
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=echo or settings.database_echo, connect_args=connect_args)


def create_db_and_tables(engine: Engine = None) -> None:
    SQLModel.metadata.create_all(engine or get_engine())


@contextmanager
def session_scope(engine: Engine = None) -> Iterator[Session]:
    with Session(engine or get_engine()) as session:
        yield session


def get_db() -> Iterator[Session]:
    with Session(get_engine()) as session:
        yield session
