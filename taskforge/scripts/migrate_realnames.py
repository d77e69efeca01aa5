"""Replace placeholder identities (``User 12``, ``demo@example.com`` ...) with realistic ones.

Emails stay unique across users and EMAIL accounts: the set of taken
emails is built up front and grows as each user is rewritten.
"""

import re
from typing import FrozenSet, Optional, Tuple

import structlog

from taskforge.models.user import Account, ProviderEnum, User
from taskforge.repository import Repository
from taskforge.schemas import IdentityChange, MigrationReport
from taskforge.utils.names import EMAIL_DOMAIN, MAX_ATTEMPTS, PersonSynthesizer, slugify

logger = structlog.get_logger()

PLACEHOLDER_NAME = re.compile(r"^(User \d+|Demo User)$", re.IGNORECASE)
PLACEHOLDER_EMAILS = (
    re.compile(r"^user\d+@example\.com$", re.IGNORECASE),
    re.compile(r"^demo@example\.com$", re.IGNORECASE),
    re.compile(r"@example\.(com|vn)$", re.IGNORECASE),
)


def is_placeholder_name(name: Optional[str]) -> bool:
    if not name or not name.strip():
        return True
    return bool(PLACEHOLDER_NAME.match(name.strip()))


def is_placeholder_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return any(p.search(email) for p in PLACEHOLDER_EMAILS)


def has_domain(email: Optional[str], domain: str = EMAIL_DOMAIN) -> bool:
    return bool(email) and email.lower().endswith(f"@{domain.lower()}")


def is_candidate(user: User, domain: str = EMAIL_DOMAIN) -> bool:
    return not has_domain(user.email, domain) or bool(
        user.name and PLACEHOLDER_NAME.match(user.name.strip())
    )


def collect_used_emails(repo: Repository) -> FrozenSet[str]:
    user_emails = repo.find_many(User, fields=("email",))
    account_emails = repo.find_many(Account, Account.provider == ProviderEnum.EMAIL, fields=("provider_id",))
    return frozenset(e.lower() for e in (*user_emails, *account_emails) if e)


def renormalize_email(email: Optional[str], fallback: str, used: FrozenSet[str], domain: str = EMAIL_DOMAIN) -> str:
    """Keep the local part, move it to ``domain`` and suffix 1, 2, ... until unused."""
    local = slugify((email or "").split("@")[0] or fallback or "user")
    candidate = f"{local}@{domain}".lower()
    suffix = 0
    while candidate in used:
        suffix += 1
        candidate = f"{local}{suffix}@{domain}".lower()
    return candidate


def plan_identity(
        user: User,
        used: FrozenSet[str],
        synthesizer: PersonSynthesizer,
        domain: str = EMAIL_DOMAIN,
        max_attempts: int = MAX_ATTEMPTS,
) -> Tuple[Optional[IdentityChange], FrozenSet[str]]:
    """Decide the new identity for one user.

    Returns ``(None, used)`` when nothing needs changing, otherwise the change
    and the taken-email set including the newly chosen address.
    """
    change_email = (bool(user.email) and not has_domain(user.email, domain)) or is_placeholder_email(user.email)
    change_name = is_placeholder_name(user.name)
    if not change_email and not change_name:
        return None, used

    new_name = user.name
    if is_placeholder_email(user.email) or change_name:
        person = synthesizer.unique_person(used, max_attempts)
        new_name = person.full_name
        new_email = person.email.lower()
    else:
        new_email = renormalize_email(user.email, user.name, used, domain)

    change = IdentityChange(
        user_id=user.id,
        old_name=user.name,
        new_name=new_name if change_name else user.name,
        old_email=user.email,
        new_email=new_email if change_email else user.email,
    )
    return change, used | {new_email}


def apply_identity(repo: Repository, user: User, change: IdentityChange) -> None:
    user.name = change.new_name
    user.email = change.new_email
    repo.save(user)

    if not change.email_changed:
        return
    account = repo.find_one(Account, Account.user_id == user.id, Account.provider == ProviderEnum.EMAIL)
    if account is not None:
        account.provider_id = user.email
        repo.save(account)


def migrate_real_names(
        repo: Repository,
        synthesizer: Optional[PersonSynthesizer] = None,
        domain: str = EMAIL_DOMAIN,
        max_attempts: int = MAX_ATTEMPTS,
) -> MigrationReport:
    synthesizer = synthesizer or PersonSynthesizer(domain=domain)
    used = collect_used_emails(repo)

    candidates = [u for u in repo.find_many(User) if is_candidate(u, domain)]
    report = MigrationReport(candidates=len(candidates))
    logger.info("identity_candidates_found", candidates=len(candidates), used_emails=len(used))

    for user in candidates:
        change, used = plan_identity(user, used, synthesizer, domain, max_attempts)
        if change is None:
            continue
        apply_identity(repo, user, change)
        report.changes.append(change)
        logger.info(
            "identity_migrated",
            user_id=change.user_id,
            name=change.new_name,
            email=change.new_email,
            previous_name=change.old_name,
            previous_email=change.old_email,
        )

    logger.info("identity_migration_completed", changed=report.changed)
    return report
