from typing import Sequence

import structlog

from taskforge.models.task import Task
from taskforge.repository import Repository
from taskforge.schemas import TaskDraft

logger = structlog.get_logger()


def materialize_tasks(repo: Repository, drafts: Sequence[TaskDraft]) -> int:
    """Persist task drafts as a single batch and return how many were inserted.

    A failing batch raises PersistenceError with nothing committed; it is
    never retried piecemeal.
    """
    rows = [Task(**draft.model_dump()) for draft in drafts]
    inserted = repo.bulk_insert(Task, rows)
    logger.debug("tasks_materialized", count=inserted)
    return inserted
