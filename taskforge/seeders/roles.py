from typing import Dict, List, Mapping, Sequence

import structlog

from taskforge.errors import PrerequisiteMissing
from taskforge.models.workspace import Role, RoleName
from taskforge.repository import Repository

logger = structlog.get_logger()


class Permissions:
    CREATE_WORKSPACE = "CREATE_WORKSPACE"
    DELETE_WORKSPACE = "DELETE_WORKSPACE"
    EDIT_WORKSPACE = "EDIT_WORKSPACE"
    MANAGE_WORKSPACE_SETTINGS = "MANAGE_WORKSPACE_SETTINGS"
    ADD_MEMBER = "ADD_MEMBER"
    CHANGE_MEMBER_ROLE = "CHANGE_MEMBER_ROLE"
    REMOVE_MEMBER = "REMOVE_MEMBER"
    CREATE_PROJECT = "CREATE_PROJECT"
    EDIT_PROJECT = "EDIT_PROJECT"
    DELETE_PROJECT = "DELETE_PROJECT"
    CREATE_TASK = "CREATE_TASK"
    EDIT_TASK = "EDIT_TASK"
    DELETE_TASK = "DELETE_TASK"
    VIEW_ONLY = "VIEW_ONLY"


# insertion order is the bootstrap order
ROLE_PERMISSIONS: Dict[RoleName, List[str]] = {
    RoleName.OWNER: [
        Permissions.CREATE_WORKSPACE,
        Permissions.EDIT_WORKSPACE,
        Permissions.DELETE_WORKSPACE,
        Permissions.MANAGE_WORKSPACE_SETTINGS,
        Permissions.ADD_MEMBER,
        Permissions.CHANGE_MEMBER_ROLE,
        Permissions.REMOVE_MEMBER,
        Permissions.CREATE_PROJECT,
        Permissions.EDIT_PROJECT,
        Permissions.DELETE_PROJECT,
        Permissions.CREATE_TASK,
        Permissions.EDIT_TASK,
        Permissions.DELETE_TASK,
        Permissions.VIEW_ONLY,
    ],
    RoleName.ADMIN: [
        Permissions.ADD_MEMBER,
        Permissions.CREATE_PROJECT,
        Permissions.EDIT_PROJECT,
        Permissions.DELETE_PROJECT,
        Permissions.CREATE_TASK,
        Permissions.EDIT_TASK,
        Permissions.DELETE_TASK,
        Permissions.MANAGE_WORKSPACE_SETTINGS,
        Permissions.VIEW_ONLY,
    ],
    RoleName.MEMBER: [
        Permissions.VIEW_ONLY,
        Permissions.CREATE_TASK,
        Permissions.EDIT_TASK,
    ],
}


def bootstrap_roles(
        repo: Repository,
        catalog: Mapping[RoleName, Sequence[str]] = ROLE_PERMISSIONS,
) -> List[RoleName]:
    """Create every catalog role that does not exist yet.

    Existing roles keep whatever permissions they already have.
    """
    created = []
    for name, permissions in catalog.items():
        if repo.exists(Role, Role.name == name):
            continue
        repo.save(Role(name=name, permissions=list(permissions)))
        created.append(name)
        logger.info("role_created", role=name.value)

    logger.info("roles_ensured", created=[n.value for n in created])
    return created


def require_roles(repo: Repository, *names: RoleName) -> Dict[RoleName, Role]:
    roles = {}
    for name in names:
        role = repo.find_one(Role, Role.name == name)
        if role is not None:
            roles[name] = role

    missing = [n.value for n in names if n not in roles]
    if missing:
        raise PrerequisiteMissing(missing)
    return roles
