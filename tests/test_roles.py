import pytest

from taskforge.errors import PrerequisiteMissing
from taskforge.models.workspace import Role, RoleName
from taskforge.seeders.roles import ROLE_PERMISSIONS, Permissions, bootstrap_roles, require_roles

pytestmark = pytest.mark.unit


def test_bootstrap_creates_every_role_once(repo):
    created = bootstrap_roles(repo)

    assert created == [RoleName.OWNER, RoleName.ADMIN, RoleName.MEMBER]
    assert repo.count(Role) == 3
    owner = repo.find_one(Role, Role.name == RoleName.OWNER)
    assert owner.permissions == ROLE_PERMISSIONS[RoleName.OWNER]


def test_bootstrap_is_idempotent(repo):
    bootstrap_roles(repo)
    assert bootstrap_roles(repo) == []
    assert repo.count(Role) == 3


def test_bootstrap_does_not_reconcile_existing_permissions(repo):
    repo.save(Role(name=RoleName.MEMBER, permissions=[Permissions.VIEW_ONLY]))

    created = bootstrap_roles(repo)

    assert RoleName.MEMBER not in created
    member = repo.find_one(Role, Role.name == RoleName.MEMBER)
    assert member.permissions == [Permissions.VIEW_ONLY]


def test_require_roles_reports_missing_names(repo):
    repo.save(Role(name=RoleName.OWNER, permissions=[]))

    with pytest.raises(PrerequisiteMissing) as info:
        require_roles(repo, RoleName.OWNER, RoleName.ADMIN, RoleName.MEMBER)

    assert info.value.missing == ["ADMIN", "MEMBER"]
    assert "bootstrap-roles" in str(info.value)


def test_require_roles_returns_by_name(repo, roles):
    assert set(roles) == {RoleName.OWNER, RoleName.ADMIN, RoleName.MEMBER}
    assert all(role.id is not None for role in roles.values())
