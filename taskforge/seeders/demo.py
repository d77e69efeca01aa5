import random
from datetime import datetime
from typing import Optional

import structlog

from taskforge.materializer import materialize_tasks
from taskforge.models.task import Task, TaskPriority, TaskStatus
from taskforge.models.workspace import RoleName, Workspace
from taskforge.repository import Repository
from taskforge.schemas import DemoSeedConfig, SeedReport, TaskDraft
from taskforge.seeders.graph import (
    TASK_DESCRIPTIONS,
    create_workspace,
    ensure_project,
    ensure_user,
    epoch_millis,
    make_task_code,
    pick_assignee,
    pick_due_date,
    workspace_member_map,
)
from taskforge.seeders.roles import require_roles
from taskforge.utils.names import PersonSynthesizer
from taskforge.utils.sampling import choice
from taskforge.utils.security import hash_password

logger = structlog.get_logger()

DEMO_TAG = "SEED"
DEMO_WORKSPACE_NAME = "Demo Workspace"
DEMO_PROJECTS = ("Project Alpha", "Project Beta", "Project Gamma", "Project Delta")
DEMO_VERBS = ("Design", "Build", "Fix", "Test", "Deploy")


def seed_demo_data(
        repo: Repository,
        config: Optional[DemoSeedConfig] = None,
        rng: Optional[random.Random] = None,
        now: Optional[datetime] = None,
) -> SeedReport:
    """Seed one user, one workspace, four projects and ``config.task_count`` tasks.

    Does nothing when the store already holds any task.
    """
    config = config or DemoSeedConfig()
    rng = rng or random.Random()
    now = now or datetime.now()
    report = SeedReport(dataset="demo")

    existing = repo.count(Task)
    if existing > 0:
        logger.info("seed_demo_skipped", existing_tasks=existing)
        report.skipped = True
        report.reason = f"database already has {existing} tasks"
        return report

    logger.info("seed_demo_started", tasks=config.task_count)
    owner_role = require_roles(repo, RoleName.OWNER)[RoleName.OWNER]

    # 1. demo user
    person = PersonSynthesizer(rng, domain=config.email_domain).person()
    user, created = ensure_user(repo, person, hash_password(config.password))
    report.users += int(created)
    logger.info("seed_demo_user", email=user.email, created=created)

    # 2. demo workspace owned by that user
    workspace = repo.find_one(Workspace, Workspace.owner_id == user.id)
    if workspace is None:
        workspace = create_workspace(
            repo, user, owner_role, DEMO_WORKSPACE_NAME, "Workspace for demo data"
        )
        report.workspaces += 1
        report.members += 1
        logger.info("seed_demo_workspace_created", workspace_id=workspace.id)

    # 3. projects
    projects = []
    for name in DEMO_PROJECTS:
        project, created = ensure_project(repo, workspace, name, user.id)
        report.projects += int(created)
        projects.append(project)

    # 4. tasks
    members = workspace_member_map(repo, [workspace.id]).get(workspace.id, [])
    statuses = list(TaskStatus)
    priorities = list(TaskPriority)
    stamp = epoch_millis(now)

    drafts = []
    for i in range(config.task_count):
        project = choice(rng, projects)
        drafts.append(
            TaskDraft(
                task_code=make_task_code(DEMO_TAG, stamp, i),
                title=f"Task #{i + 1}: {choice(rng, DEMO_VERBS)}",
                description=choice(rng, TASK_DESCRIPTIONS),
                project_id=project.id,
                workspace_id=workspace.id,
                status=choice(rng, statuses),
                priority=choice(rng, priorities),
                due_date=pick_due_date(
                    rng, config.due_date_ratio, config.due_days_min, config.due_days_max, now
                ),
                assigned_to_id=pick_assignee(rng, members, config.assigned_ratio),
                created_by_id=user.id,
            )
        )

    report.tasks = materialize_tasks(repo, drafts)
    logger.info("seed_demo_tasks_inserted", tasks=report.tasks, projects=len(projects))
    return report
