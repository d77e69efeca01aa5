from datetime import datetime, timedelta

import pytest

from taskforge.models.user import Account, ProviderEnum, User
from taskforge.models.workspace import RoleName, WorkspaceMember
from taskforge.seeders.graph import (
    add_extra_members,
    create_workspace,
    ensure_project,
    ensure_user,
    make_task_code,
    pick_assignee,
    pick_due_date,
    random_suffix,
    workspace_member_map,
)
from taskforge.utils.names import Person

pytestmark = pytest.mark.unit

NOW = datetime(2024, 6, 1, 12, 0, 0)


def _person(i):
    return Person(full_name=f"Trần Minh {i}", email=f"minh{i}.tran@gmail.com")


def test_ensure_user_creates_user_with_mirrored_email_account(repo):
    user, created = ensure_user(repo, _person(1), "hash")

    assert created
    account = repo.find_one(Account, Account.user_id == user.id)
    assert account.provider == ProviderEnum.EMAIL
    assert account.provider_id == user.email


def test_ensure_user_reuses_existing_email(repo):
    first, _ = ensure_user(repo, _person(1), "hash")
    again, created = ensure_user(repo, _person(1), "hash")

    assert not created
    assert again.id == first.id
    assert repo.count(User) == 1
    assert repo.count(Account) == 1


def test_ensure_user_matches_email_case_insensitively(repo):
    existing = repo.save(User(email="Anh.Nguyen@gmail.com", name="Nguyễn Anh", password_hash="hash"))
    repo.save(Account(user_id=existing.id, provider=ProviderEnum.EMAIL, provider_id=existing.email))

    user, created = ensure_user(repo, Person("Nguyễn Anh", "anh.nguyen@gmail.com"), "x")

    assert not created
    assert user.id == existing.id
    assert repo.count(User) == 1
    assert repo.count(Account) == 1


def test_ensure_user_reuses_owner_of_matching_email_account(repo):
    owner = repo.save(User(email="owner@gmail.com", name="Owner", password_hash="hash"))
    repo.save(Account(user_id=owner.id, provider=ProviderEnum.EMAIL, provider_id="Login.Alias@Gmail.com"))

    user, created = ensure_user(repo, Person("Lê Alias", "login.alias@gmail.com"), "x")

    assert not created
    assert user.id == owner.id
    assert repo.count(User) == 1
    assert repo.count(Account) == 1


def test_create_workspace_adds_owner_member_and_switches_workspace(repo, roles):
    owner, _ = ensure_user(repo, _person(1), "hash")

    workspace = create_workspace(repo, owner, roles[RoleName.OWNER], "Team", "desc")

    member = repo.find_one(WorkspaceMember, WorkspaceMember.workspace_id == workspace.id)
    assert member.user_id == owner.id
    assert member.role_id == roles[RoleName.OWNER].id
    assert repo.find_one(User, User.id == owner.id).current_workspace_id == workspace.id


def test_add_extra_members_samples_others_without_replacement(repo, roles, rng):
    users = [ensure_user(repo, _person(i), "hash")[0] for i in range(6)]
    workspace = create_workspace(repo, users[0], roles[RoleName.OWNER], "Team", "desc")
    extra_roles = [roles[RoleName.ADMIN], roles[RoleName.MEMBER]]

    added = add_extra_members(repo, workspace, users, 10, extra_roles, rng)

    # capped at the five non-owners
    assert len(added) == 5
    assert users[0].id not in {m.user_id for m in added}
    assert len({m.user_id for m in added}) == 5
    assert {m.role_id for m in added} <= {r.id for r in extra_roles}


def test_ensure_project_reuses_name_within_workspace(repo, roles):
    owner, _ = ensure_user(repo, _person(1), "hash")
    workspace = create_workspace(repo, owner, roles[RoleName.OWNER], "Team", "desc")

    first, created = ensure_project(repo, workspace, "Project Alpha", owner.id, emoji="🚀")
    again, created_again = ensure_project(repo, workspace, "Project Alpha", owner.id)

    assert created and not created_again
    assert first.id == again.id
    assert first.description == "Project Alpha description"


def test_workspace_member_map_groups_user_ids(repo, roles, rng):
    users = [ensure_user(repo, _person(i), "hash")[0] for i in range(3)]
    ws_a = create_workspace(repo, users[0], roles[RoleName.OWNER], "A", "")
    ws_b = create_workspace(repo, users[1], roles[RoleName.OWNER], "B", "")
    add_extra_members(repo, ws_a, users, 2, [roles[RoleName.MEMBER]], rng)

    members = workspace_member_map(repo, [ws_a.id, ws_b.id])

    assert sorted(members[ws_a.id]) == sorted(u.id for u in users)
    assert members[ws_b.id] == [users[1].id]
    assert workspace_member_map(repo, []) == {}


def test_pick_assignee_never_assigns_without_members(rng):
    assert all(pick_assignee(rng, [], 1.0) is None for _ in range(100))


def test_pick_assignee_respects_ratio(rng):
    assert all(pick_assignee(rng, [7, 8], 1.0) in (7, 8) for _ in range(100))
    assert all(pick_assignee(rng, [7, 8], 0.0) is None for _ in range(100))


def test_pick_due_date_range_includes_overdue(rng):
    dates = [pick_due_date(rng, 1.0, -30, 90, NOW) for _ in range(500)]

    assert all(NOW - timedelta(days=30) <= d <= NOW + timedelta(days=90) for d in dates)
    assert any(d < NOW for d in dates)
    assert all(pick_due_date(rng, 0.0, -30, 90, NOW) is None for _ in range(50))


def test_task_codes(rng):
    assert make_task_code("SEED", 1700000000000, 3) == "SEED-1700000000000-3"
    suffix = random_suffix(rng)
    assert len(suffix) == 4 and suffix.isalnum() and suffix == suffix.lower()
    assert make_task_code("MULTI", 1, 0, suffix) == f"MULTI-1-0-{suffix}"
