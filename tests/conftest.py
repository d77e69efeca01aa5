"""
Shared fixtures: an in-memory SQLite store wrapped in a Repository, a seeded
random source, and the bootstrapped role catalog.
"""

import random

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import taskforge.database  # noqa: F401  (registers the tables)
from taskforge.models.workspace import RoleName
from taskforge.repository import Repository
from taskforge.seeders.roles import bootstrap_roles, require_roles


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def repo(session):
    return Repository(session)


@pytest.fixture
def rng():
    return random.Random(20240601)


@pytest.fixture
def roles(repo):
    bootstrap_roles(repo)
    return require_roles(repo, RoleName.OWNER, RoleName.ADMIN, RoleName.MEMBER)
