"""extreg CLI — operator entry point for the extension registry."""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from extreg import __version__
from extreg.config import load_settings
from extreg.context import RegistryContext
from extreg.logging_setup import setup_logging, verbosity_for_level
from extreg.registry.models import SearchQuery
from extreg.submissions.models import SubmissionStatus

console = Console()

_STATUS_STYLE = {
    "pending": "yellow",
    "approved": "green",
    "rejected": "red",
    "error": "magenta",
}


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="YAML settings file")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Warnings and errors only")
@click.option("--log-file", type=click.Path(path_type=Path), default=None)
@click.pass_context
def main(ctx: click.Context, config_path, verbose: bool, quiet: bool, log_file):
    """Extension Registry — validate, review, and publish extensions."""
    settings = load_settings(config_path)
    verbosity = 1 if verbose else -1 if quiet else verbosity_for_level(settings.log_level)
    setup_logging(verbosity=verbosity, log_file=log_file)
    ctx.obj = RegistryContext.from_settings(settings)


# ── Accounts ─────────────────────────────────────────────────────────


@main.group()
def accounts():
    """Manage identity-provider accounts."""


@accounts.command("create")
@click.argument("email")
@click.option("--name", "display_name", default="", help="Display name")
@click.pass_obj
def accounts_create(context: RegistryContext, email: str, display_name: str):
    """Register an account for EMAIL."""
    try:
        account = context.provider.create_account(email, display_name=display_name)
    except ValueError as e:
        raise click.ClickException(str(e))
    console.print(f"[green]Created account[/] {account.email} ({account.uid})")


@accounts.command("list")
@click.pass_obj
def accounts_list(context: RegistryContext):
    """List accounts and their claims."""
    table = Table(title="Accounts")
    table.add_column("UID", style="dim")
    table.add_column("Email", style="cyan")
    table.add_column("Admin", justify="center")
    table.add_column("Disabled", justify="center")
    for a in context.provider.list_accounts():
        table.add_row(
            a.uid,
            a.email,
            "yes" if a.custom_claims.get("admin") is True else "",
            "yes" if a.disabled else "",
        )
    console.print(table)


@main.command()
@click.argument("email")
@click.pass_obj
def token(context: RegistryContext, email: str):
    """Issue a bearer token for EMAIL."""
    account = context.provider.get_account_by_email(email)
    if account is None:
        raise click.ClickException(f"No account found for {email}")
    click.echo(context.provider.issue_token(account.uid))


@main.command("grant-admin")
@click.argument("email")
@click.pass_obj
def grant_admin(context: RegistryContext, email: str):
    """Attach the admin claim to EMAIL's account.

    Operator bootstrap: this runs with direct store access and does not go
    through the authorization gate. Use it to seed the first administrator;
    afterwards grant through the API.
    """
    console.print(f"Looking up account {email}...")
    account = context.provider.get_account_by_email(email)
    if account is None:
        raise click.ClickException(f"No account found for {email}")
    context.provider.set_custom_claims(account.uid, {"admin": True})
    context.audit.log_event(
        actor="operator",
        action="grant_admin",
        resource_type="account",
        resource_id=account.uid,
        details={"email": email, "bootstrap": True},
    )
    console.print(f"[green]Admin claim granted to[/] {email}")


# ── Submissions ──────────────────────────────────────────────────────


@main.command()
@click.option("--status", type=click.Choice([s.value for s in SubmissionStatus]), default=None)
@click.pass_obj
def submissions(context: RegistryContext, status: str | None):
    """List submissions."""
    items = context.submissions.list(status)
    if not items:
        console.print("[yellow]No submissions.[/]")
        return

    table = Table(title=f"Submissions ({len(items)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Status")
    table.add_column("Submitter")
    table.add_column("Message")
    for s in items:
        style = _STATUS_STYLE.get(s.status.value, "")
        table.add_row(
            s.id,
            s.name,
            f"[{style}]{s.status.value}[/]",
            s.submitted_by_email,
            s.status_message[:60],
        )
    console.print(table)


@main.command()
@click.argument("submission_id")
@click.pass_obj
def validate(context: RegistryContext, submission_id: str):
    """Run the validation pipeline for SUBMISSION_ID."""
    result = asyncio.run(context.pipeline.run(submission_id))
    if result is None:
        raise click.ClickException(f"Submission {submission_id} could not be processed")
    style = _STATUS_STYLE.get(result.status.value, "")
    console.print(f"[{style}]{result.status.value}[/] — {result.status_message}")
    if result.manifest_url:
        console.print(f"  Manifest: {result.manifest_url}")


# ── Registry ─────────────────────────────────────────────────────────


@main.group()
def registry():
    """Browse the public registry."""


def _print_entries(entries, title: str) -> None:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Version", justify="right")
    table.add_column("Category")
    table.add_column("Tags")
    for e in entries:
        table.add_row(e.id, e.name, e.version, e.category, ", ".join(e.tags))
    console.print(table)


@registry.command("list")
@click.pass_obj
def registry_list(context: RegistryContext):
    """List all approved extensions."""
    _print_entries(context.catalog.list_all(), "Registry")


@registry.command("search")
@click.argument("text", default="")
@click.option("--tag", "tags", multiple=True, help="Filter by tag (repeatable)")
@click.option("--category", type=click.Choice(["persona", "tool"]), default=None)
@click.pass_obj
def registry_search(context: RegistryContext, text: str, tags: tuple[str, ...], category: str | None):
    """Search approved extensions by TEXT, tags, and category."""
    result = context.catalog.search(SearchQuery(text=text, tags=list(tags), category=category or ""))
    _print_entries(result.entries, f"Results ({result.total_count})")


# ── Audit ────────────────────────────────────────────────────────────


@main.command()
@click.option("--action", default=None, help="Filter by action")
@click.option("--limit", default=50, show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Emit JSON")
@click.pass_obj
def audit(context: RegistryContext, action: str | None, limit: int, as_json: bool):
    """Show recent audit events."""
    events = context.audit.get_events(action=action, limit=limit)
    if as_json:
        click.echo(json.dumps([e.__dict__ for e in events], indent=2))
        return
    table = Table(title="Audit log")
    table.add_column("Time", style="dim")
    table.add_column("Actor")
    table.add_column("Action", style="cyan")
    table.add_column("Resource")
    table.add_column("OK", justify="center")
    for e in events:
        table.add_row(e.timestamp, e.actor, e.action, f"{e.resource_type}/{e.resource_id}",
                      "yes" if e.success else "no")
    console.print(table)


if __name__ == "__main__":
    main()
