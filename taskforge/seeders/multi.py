"""Multi-tenant stress dataset.

Many users, each owning one or more workspaces shared with a handful of the
other users, a few projects per workspace and a large pool of tasks spread
over all of them. Task codes carry the ``MULTI-`` tag, which is also the
marker used to skip a second run.
"""

import json
import random
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union

import structlog

from taskforge.materializer import materialize_tasks
from taskforge.models.task import Task
from taskforge.models.user import User
from taskforge.models.workspace import Project, RoleName, Workspace, WorkspaceMember
from taskforge.repository import Repository
from taskforge.schemas import (
    MultiTenantSeedConfig,
    ProjectFixture,
    SeedReport,
    TaskDraft,
    TaskFixture,
    UserFixture,
    WorkspaceFixture,
)
from taskforge.seeders.graph import (
    TASK_DESCRIPTIONS,
    add_extra_members,
    create_workspace,
    ensure_project,
    ensure_user,
    epoch_millis,
    make_task_code,
    pick_assignee,
    pick_due_date,
    random_suffix,
    workspace_member_map,
)
from taskforge.seeders.roles import require_roles
from taskforge.utils.names import PersonSynthesizer
from taskforge.utils.sampling import PRIORITY_DISTRIBUTION, STATUS_DISTRIBUTION, choice, rand_int, weighted_pick
from taskforge.utils.security import hash_password

logger = structlog.get_logger()

MULTI_TAG = "MULTI"
WORKSPACE_PREFIX = "Multi Workspace"
FIXTURE_TASK_LIMIT = 500

TASK_VERBS = ("Design", "Build", "Refactor", "Fix", "Test", "Deploy", "Document", "Analyze", "Integrate", "Migrate")
TASK_AREAS = ("API", "Frontend", "Backend", "Database", "CI/CD", "Auth", "Billing", "Analytics", "Marketing", "Infra")
PROJECT_NAMES = ("Alpha", "Beta", "Gamma", "Delta", "Omega", "Kappa", "Sigma", "Theta")
EMOJIS = ("📊", "🚀", "🔧", "🧪", "📈", "🛠️", "🧩", "⚙️", "💡", "🗂️")


def multi_dataset_present(repo: Repository) -> bool:
    return repo.exists(Task, Task.task_code.startswith(f"{MULTI_TAG}-"))


def seed_multi_tenant_data(
        repo: Repository,
        config: Optional[MultiTenantSeedConfig] = None,
        rng: Optional[random.Random] = None,
        now: Optional[datetime] = None,
        fixtures_dir: Union[str, Path, None] = None,
) -> SeedReport:
    config = config or MultiTenantSeedConfig()
    rng = rng or random.Random()
    now = now or datetime.now()
    report = SeedReport(dataset="multi")

    if multi_dataset_present(repo):
        logger.info("seed_multi_skipped", reason="MULTI- dataset already present")
        report.skipped = True
        report.reason = "MULTI- dataset already present"
        return report

    logger.info(
        "seed_multi_started",
        users=config.users,
        workspaces_per_user=f"{config.workspaces_per_user_min}-{config.workspaces_per_user_max}",
        projects_per_workspace=f"{config.projects_per_workspace_min}-{config.projects_per_workspace_max}",
        tasks=config.tasks_total,
    )

    roles = require_roles(repo, RoleName.OWNER, RoleName.ADMIN, RoleName.MEMBER)
    owner_role = roles[RoleName.OWNER]
    extra_roles = [roles[RoleName.ADMIN], roles[RoleName.MEMBER]]

    # 1. users + EMAIL accounts, emails unique within the run
    synthesizer = PersonSynthesizer(rng, domain=config.email_domain)
    password_hash = hash_password(config.password)
    used_emails: Set[str] = set()
    users: List[User] = []
    for _ in range(config.users):
        person = synthesizer.unique_person(used_emails)
        used_emails.add(person.email.lower())
        user, created = ensure_user(repo, person, password_hash)
        report.users += int(created)
        users.append(user)
    logger.info("seed_multi_users_ensured", users=len(users), created=report.users)

    # 2. workspaces with owner + extra members
    workspaces: List[Workspace] = []
    for user in users:
        for n in range(rand_int(rng, config.workspaces_per_user_min, config.workspaces_per_user_max)):
            name = f"{WORKSPACE_PREFIX} {user.name}-{n + 1}"
            workspace = repo.find_one(Workspace, Workspace.owner_id == user.id, Workspace.name == name)
            if workspace is None:
                workspace = create_workspace(repo, user, owner_role, name, "Multi-tenant sample workspace")
                extra = add_extra_members(
                    repo,
                    workspace,
                    users,
                    rand_int(rng, config.members_per_workspace_min, config.members_per_workspace_max),
                    extra_roles,
                    rng,
                )
                report.workspaces += 1
                report.members += 1 + len(extra)
            workspaces.append(workspace)
    logger.info("seed_multi_workspaces_ensured", workspaces=len(workspaces), created=report.workspaces)

    # 3. projects per workspace
    placements: List[Tuple[Project, Workspace]] = []
    for workspace in workspaces:
        for _ in range(rand_int(rng, config.projects_per_workspace_min, config.projects_per_workspace_max)):
            name = f"Project {choice(rng, PROJECT_NAMES)}"
            project, created = ensure_project(
                repo, workspace, name, workspace.owner_id, emoji=choice(rng, EMOJIS)
            )
            report.projects += int(created)
            placements.append((project, workspace))
    logger.info("seed_multi_projects_ensured", projects=len(placements), created=report.projects)

    # 4. tasks, assignees drawn from the task's own workspace
    members = workspace_member_map(repo, [w.id for w in workspaces])
    if config.tasks_total and not placements:
        logger.warning("seed_multi_no_projects", tasks_requested=config.tasks_total)

    stamp = epoch_millis(now)
    drafts = []
    for i in range(config.tasks_total if placements else 0):
        project, workspace = choice(rng, placements)
        drafts.append(
            TaskDraft(
                task_code=make_task_code(MULTI_TAG, stamp, i, random_suffix(rng)),
                title=f"{choice(rng, TASK_VERBS)} {choice(rng, TASK_AREAS)}",
                description=choice(rng, TASK_DESCRIPTIONS),
                project_id=project.id,
                workspace_id=workspace.id,
                status=weighted_pick(STATUS_DISTRIBUTION, rng),
                priority=weighted_pick(PRIORITY_DISTRIBUTION, rng),
                due_date=pick_due_date(
                    rng, config.due_date_ratio, config.due_days_min, config.due_days_max, now
                ),
                assigned_to_id=pick_assignee(rng, members.get(workspace.id, []), config.assigned_ratio),
                created_by_id=workspace.owner_id,
            )
        )

    report.tasks = materialize_tasks(repo, drafts)
    logger.info("seed_multi_tasks_inserted", tasks=report.tasks)

    if fixtures_dir is not None:
        try:
            export_fixtures(repo, fixtures_dir)
            report.fixtures_dir = str(fixtures_dir)
        except OSError as exc:
            logger.warning("seed_multi_fixture_export_skipped", error=str(exc))

    return report


def export_fixtures(repo: Repository, directory: Union[str, Path], task_limit: int = FIXTURE_TASK_LIMIT) -> Path:
    """Dump a bounded sample of the multi-tenant dataset as JSON files."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    workspaces = repo.find_many(Workspace, Workspace.name.startswith(WORKSPACE_PREFIX))
    workspace_ids = [w.id for w in workspaces]
    user_ids = set()
    if workspace_ids:
        user_ids = set(
            repo.find_many(WorkspaceMember, WorkspaceMember.workspace_id.in_(workspace_ids), fields=("user_id",))
        )
    users = repo.find_many(User, User.id.in_(user_ids)) if user_ids else []
    projects = repo.find_many(Project, Project.workspace_id.in_(workspace_ids)) if workspace_ids else []
    tasks = repo.find_many(Task, Task.task_code.startswith(f"{MULTI_TAG}-"), limit=task_limit)

    dumps = {
        "users.json": [UserFixture.model_validate(u) for u in users],
        "workspaces.json": [WorkspaceFixture.model_validate(w) for w in workspaces],
        "projects.json": [ProjectFixture.model_validate(p) for p in projects],
        "tasks.json": [TaskFixture.model_validate(t) for t in tasks],
    }
    for filename, items in dumps.items():
        payload = [item.model_dump(mode="json") for item in items]
        (directory / filename).write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    logger.info(
        "seed_multi_fixtures_exported",
        directory=str(directory),
        users=len(users),
        workspaces=len(workspaces),
        projects=len(projects),
        tasks=len(tasks),
    )
    return directory
