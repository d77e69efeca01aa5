"""Building blocks shared by the demo and multi-tenant seeders.

Parents are always committed before children reference them, so every id
handed to a later step already exists in the store.
"""

import random
import string
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func

from taskforge.models.user import Account, ProviderEnum, User
from taskforge.models.workspace import Project, Role, Workspace, WorkspaceMember
from taskforge.repository import Repository
from taskforge.utils.names import Person
from taskforge.utils.sampling import choice, rand_int

TASK_DESCRIPTIONS = (
    "Small tweak",
    "Important change",
    "Blocking bug",
    "Performance improvement",
    "Feature enhancement",
)

_BASE36 = string.digits + string.ascii_lowercase


def ensure_user(repo: Repository, person: Person, password_hash: str) -> Tuple[User, bool]:
    """Return the user owning ``person.email``, creating it with its EMAIL account if needed."""
    # emails are unique case-insensitively across users and EMAIL accounts
    email = person.email.lower()
    user = repo.find_one(User, func.lower(User.email) == email)
    if user is None:
        account = repo.find_one(
            Account, Account.provider == ProviderEnum.EMAIL, func.lower(Account.provider_id) == email
        )
        if account is not None:
            user = repo.find_one(User, User.id == account.user_id)
    if user is not None:
        return user, False

    user = repo.save(User(email=person.email, name=person.full_name, password_hash=password_hash))
    repo.save(Account(user_id=user.id, provider=ProviderEnum.EMAIL, provider_id=user.email))
    return user, True


def add_member(
        repo: Repository,
        workspace: Workspace,
        user: User,
        role: Role,
        joined_at: Optional[datetime] = None,
) -> WorkspaceMember:
    return repo.save(
        WorkspaceMember(
            workspace_id=workspace.id,
            user_id=user.id,
            role_id=role.id,
            joined_at=joined_at or datetime.now(),
        )
    )


def create_workspace(
        repo: Repository,
        owner: User,
        owner_role: Role,
        name: str,
        description: str,
) -> Workspace:
    # 1. workspace
    workspace = repo.save(Workspace(name=name, description=description, owner_id=owner.id))

    # 2. owner joins as OWNER
    add_member(repo, workspace, owner, owner_role)

    # 3. owner lands in the new workspace
    owner.current_workspace_id = workspace.id
    repo.save(owner)
    return workspace


def add_extra_members(
        repo: Repository,
        workspace: Workspace,
        candidates: Sequence[User],
        count: int,
        roles: Sequence[Role],
        rng: random.Random,
) -> List[WorkspaceMember]:
    # sampled without replacement so (user, workspace) stays unique
    others = [u for u in candidates if u.id != workspace.owner_id]
    picked = rng.sample(others, min(count, len(others)))
    return [add_member(repo, workspace, u, choice(rng, roles)) for u in picked]


def ensure_project(
        repo: Repository,
        workspace: Workspace,
        name: str,
        created_by_id: int,
        emoji: Optional[str] = None,
) -> Tuple[Project, bool]:
    project = repo.find_one(Project, Project.name == name, Project.workspace_id == workspace.id)
    if project is not None:
        return project, False

    project = Project(
        name=name,
        description=f"{name} description",
        emoji=emoji,
        workspace_id=workspace.id,
        created_by_id=created_by_id,
    )
    return repo.save(project), True


def workspace_member_map(repo: Repository, workspace_ids: Iterable[int]) -> Dict[int, List[int]]:
    ids = list(workspace_ids)
    if not ids:
        return {}
    rows = repo.find_many(
        WorkspaceMember,
        WorkspaceMember.workspace_id.in_(ids),
        fields=("workspace_id", "user_id"),
    )
    members: Dict[int, List[int]] = {}
    for workspace_id, user_id in rows:
        members.setdefault(workspace_id, []).append(user_id)
    return members


def pick_assignee(rng: random.Random, members: Sequence[int], ratio: float) -> Optional[int]:
    # an empty membership list leaves the task unassigned whatever the draw
    if rng.random() < ratio and members:
        return choice(rng, members)
    return None


def pick_due_date(
        rng: random.Random,
        ratio: float,
        days_min: int,
        days_max: int,
        now: datetime,
) -> Optional[datetime]:
    # negative offsets give overdue tasks
    days = rand_int(rng, days_min, days_max)
    if rng.random() < ratio:
        return now + timedelta(days=days)
    return None


def epoch_millis(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def random_suffix(rng: random.Random, length: int = 4) -> str:
    return "".join(choice(rng, _BASE36) for _ in range(length))


def make_task_code(tag: str, stamp: int, index: int, suffix: Optional[str] = None) -> str:
    code = f"{tag}-{stamp}-{index}"
    return f"{code}-{suffix}" if suffix else code
