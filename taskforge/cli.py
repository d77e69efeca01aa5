"""Command line entry point for taskforge.

Invoked as::

    taskforge [OPTIONS] COMMAND [ARGS]...

Commands
--------
init-db             Create the database tables
bootstrap-roles     Ensure the OWNER/ADMIN/MEMBER roles exist
seed-demo           Seed the single-tenant demo dataset
seed-multi          Seed the multi-tenant stress dataset
migrate-realnames   Rewrite placeholder user names and emails
"""
import random
import sys
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from taskforge.config import get_settings
from taskforge.database import create_db_and_tables, get_engine, session_scope
from taskforge.errors import TaskforgeError
from taskforge.repository import Repository
from taskforge.schemas import DemoSeedConfig, MultiTenantSeedConfig, SeedReport
from taskforge.scripts.migrate_realnames import migrate_real_names
from taskforge.seeders.demo import seed_demo_data
from taskforge.seeders.multi import seed_multi_tenant_data
from taskforge.seeders.roles import bootstrap_roles
from taskforge.utils.logger import configure_logging
from taskforge.utils.names import PersonSynthesizer

console = Console()
err_console = Console(stderr=True)


def _rng(seed: Optional[int]) -> random.Random:
    if seed is None:
        seed = get_settings().random_seed
    return random.Random(seed)


def _fail(exc: Exception) -> None:
    err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
    sys.exit(1)


def _print_seed_report(report: SeedReport) -> None:
    if report.skipped:
        console.print(f"[yellow]Skipped[/yellow] {report.dataset}: {report.reason}")
        return
    console.print(f"[green]Seeded {report.dataset} dataset[/green]")
    table = Table()
    table.add_column("Entity")
    table.add_column("Created", justify="right")
    for entity in ("users", "workspaces", "members", "projects", "tasks"):
        table.add_row(entity, str(getattr(report, entity)))
    console.print(table)
    if report.fixtures_dir:
        console.print(f"Fixtures exported to {report.fixtures_dir}")


@click.group()
@click.option("--database-url", envvar="DATABASE_URL", default=None, help="Overrides DATABASE_URL.")
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str]) -> None:
    """Synthetic data seeding and identity migration for the task manager."""
    configure_logging()
    ctx.obj = get_engine(database_url or "")


@cli.command("init-db")
@click.pass_obj
def init_db(engine) -> None:
    """Create all tables."""
    create_db_and_tables(engine)
    console.print("[green]Tables ready.[/green]")


@cli.command("bootstrap-roles")
@click.pass_obj
def bootstrap_roles_cmd(engine) -> None:
    """Create missing roles; existing roles are left as they are."""
    create_db_and_tables(engine)
    try:
        with session_scope(engine) as session:
            created = bootstrap_roles(Repository(session))
    except TaskforgeError as exc:
        _fail(exc)
    names = ", ".join(r.value for r in created) or "none"
    console.print(f"Roles created: {names}")


@cli.command("seed-demo")
@click.option("--count", type=int, default=None, help="Number of demo tasks.")
@click.option("--seed", type=int, default=None, help="Random seed.")
@click.pass_obj
def seed_demo(engine, count: Optional[int], seed: Optional[int]) -> None:
    """Seed the demo dataset unless tasks already exist."""
    create_db_and_tables(engine)
    try:
        config = DemoSeedConfig.from_settings(get_settings())
        if count is not None:
            config = DemoSeedConfig.model_validate({**config.model_dump(), "task_count": count})
        with session_scope(engine) as session:
            repo = Repository(session)
            bootstrap_roles(repo)
            report = seed_demo_data(repo, config, rng=_rng(seed))
    except (TaskforgeError, ValidationError) as exc:
        _fail(exc)
    _print_seed_report(report)


@cli.command("seed-multi")
@click.option("--users", type=int, default=None, help="Number of users.")
@click.option("--tasks", type=int, default=None, help="Total number of tasks.")
@click.option("--export-fixtures", is_flag=True, default=False,
              help="Write a JSON sample of the dataset after seeding.")
@click.option("--fixtures-dir", type=click.Path(file_okay=False), default=None,
              help="Fixture directory; overrides SEED_FIXTURES_DIR.")
@click.option("--seed", type=int, default=None, help="Random seed.")
@click.pass_obj
def seed_multi(engine, users: Optional[int], tasks: Optional[int], export_fixtures: bool,
               fixtures_dir: Optional[str], seed: Optional[int]) -> None:
    """Seed the multi-tenant dataset unless MULTI- tasks already exist."""
    overrides = {}
    if users is not None:
        overrides["users"] = users
    if tasks is not None:
        overrides["tasks_total"] = tasks
    settings = get_settings()
    if export_fixtures:
        fixtures_dir = fixtures_dir or settings.seed_fixtures_dir
    else:
        fixtures_dir = None

    create_db_and_tables(engine)
    try:
        config = MultiTenantSeedConfig.model_validate(
            {**MultiTenantSeedConfig.from_settings(settings).model_dump(), **overrides}
        )
        with session_scope(engine) as session:
            repo = Repository(session)
            bootstrap_roles(repo)
            report = seed_multi_tenant_data(repo, config, rng=_rng(seed), fixtures_dir=fixtures_dir)
    except (TaskforgeError, ValidationError) as exc:
        _fail(exc)
    _print_seed_report(report)


@cli.command("migrate-realnames")
@click.option("--seed", type=int, default=None, help="Random seed.")
@click.pass_obj
def migrate_realnames(engine, seed: Optional[int]) -> None:
    """Replace placeholder names and emails with realistic ones."""
    domain = get_settings().canonical_email_domain
    create_db_and_tables(engine)
    try:
        with session_scope(engine) as session:
            report = migrate_real_names(
                Repository(session), PersonSynthesizer(_rng(seed), domain=domain), domain=domain
            )
    except TaskforgeError as exc:
        _fail(exc)

    console.print(f"Users changed: {report.changed} of {report.candidates} candidates")
    if not report.changes:
        return
    table = Table()
    for column in ("User", "Name", "Email"):
        table.add_column(column)
    for change in report.changes:
        table.add_row(
            str(change.user_id),
            f"{change.old_name} -> {change.new_name}",
            f"{change.old_email} -> {change.new_email}",
        )
    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
