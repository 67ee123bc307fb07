"""pipesync CLI: the main entry point for syncing pipelines with fleet management."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pipesync import __version__
from pipesync.config import BackupMode, SyncConfig, SyncMode, load_remote_config
from pipesync.errors import PipeSyncError, PurgeAbortedError
from pipesync.utils.logging import setup_logging

console = Console()


def _default_store_factory(config_path: str | None):
    from pipesync.remote.http_store import HttpPipelineStore

    return HttpPipelineStore(load_remote_config(config_path))


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML file with host, user, token and timeout",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None):
    """pipesync: keep fleet-management pipelines in sync with a directory.

    Connection settings are read from FLEET_MANAGEMENT_HOST,
    FLEET_MANAGEMENT_USER and FLEET_MANAGEMENT_TOKEN, or from --config.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("store_factory", _default_store_factory)
    ctx.obj["config_path"] = config_path


def _open_store(ctx: click.Context):
    try:
        return ctx.obj["store_factory"](ctx.obj["config_path"])
    except PipeSyncError as e:
        _fail(str(e))


def _fail(message: str):
    console.print(f"[red]Error:[/] {escape(message)}")
    raise SystemExit(1)


def _close(store) -> None:
    close = getattr(store, "close", None)
    if close is not None:
        close()


# ── Sync ─────────────────────────────────────────────────────────────


@main.command()
@click.option("--dir", "-d", "root_dir", default=".", help="Directory to look for pipeline files")
@click.option("--purge", is_flag=True, help="Delete remote pipelines not found locally")
@click.option("--dry-run", is_flag=True, help="Show what would change without changing it")
@click.pass_context
def sync(ctx: click.Context, root_dir: str, purge: bool, dry_run: bool):
    """Create or update remote pipelines from local .alloy/.river files."""
    from pipesync.sync.runner import run

    config = SyncConfig(mode=SyncMode(purge=purge, dry_run=dry_run), root_dir=root_dir)
    store = _open_store(ctx)
    try:
        result = run(config, store)
    except PurgeAbortedError as e:
        _print_report(e.report)
        _fail(str(e))
    except (PipeSyncError, OSError) as e:
        _fail(str(e))
    finally:
        _close(store)

    if result.dry_run:
        _print_plan(result.plan)
        return

    _print_report(result.report)
    if not result.ok:
        raise SystemExit(1)


def _print_plan(plan) -> None:
    if not plan:
        console.print("[yellow]Nothing to do.[/]")
        return

    table = Table(title=f"Planned actions ({len(plan)})")
    table.add_column("Action", style="cyan")
    table.add_column("Pipeline")
    for planned in plan:
        table.add_row(planned.action.value, escape(planned.name))
    console.print(table)


def _print_report(report) -> None:
    if not report.outcomes:
        console.print("[yellow]No pipelines to sync.[/]")
        return

    table = Table(title="Sync results")
    table.add_column("Action", style="cyan")
    table.add_column("Pipeline")
    table.add_column("Status", justify="center")
    table.add_column("Error")
    for outcome in report.outcomes:
        status = "[green]OK[/]" if outcome.succeeded else "[red]FAILED[/]"
        table.add_row(outcome.action.value, escape(outcome.name), status, escape(outcome.error[:80]))
    console.print(table)
    console.print(f"\n{report.summary()}")


# ── Backup ───────────────────────────────────────────────────────────


@main.command()
@click.argument("target_dir")
@click.pass_context
def backup(ctx: click.Context, target_dir: str):
    """Download every remote pipeline into TARGET_DIR.

    TARGET_DIR is emptied first. Remote pipelines are not modified.
    """
    from pipesync.sync.runner import run

    config = SyncConfig(mode=BackupMode(target_dir=target_dir))
    store = _open_store(ctx)
    try:
        result = run(config, store)
    except (PipeSyncError, OSError) as e:
        _fail(str(e))
    finally:
        _close(store)

    console.print(f"[green]{escape(result.backup.summary())}[/]")
    for name, error in result.backup.failed.items():
        console.print(f"  [red]x[/] {escape(name)}: {escape(error)}")
    if not result.ok:
        raise SystemExit(1)


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.pass_context
def list_remote(ctx: click.Context):
    """List the remote pipelines."""
    store = _open_store(ctx)
    try:
        pipes = store.list()
    except PipeSyncError as e:
        _fail(str(e))
    finally:
        _close(store)

    if not pipes:
        console.print("[yellow]No remote pipelines.[/]")
        return

    table = Table(title=f"Remote pipelines ({len(pipes)})")
    table.add_column("Name", style="cyan")
    table.add_column("Matchers")
    table.add_column("Lines", justify="right")
    for p in pipes:
        table.add_row(escape(p.name), escape(" ".join(p.matchers)), str(len(p.contents.splitlines())))
    console.print(table)


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.option("--dir", "-d", "root_dir", default=".", help="Directory to look for pipeline files")
def check(root_dir: str):
    """Parse local pipeline files without contacting the remote service."""
    from pipesync.pipelines.loader import load_pipelines

    try:
        pipes = load_pipelines(root_dir)
    except (PipeSyncError, OSError) as e:
        _fail(str(e))

    if not pipes:
        console.print(f"[yellow]No pipeline files found in {root_dir}.[/]")
        return

    table = Table(title=f"Local pipelines ({len(pipes)})")
    table.add_column("Name", style="cyan")
    table.add_column("Matchers")
    table.add_column("Source", style="dim")
    for p in pipes:
        table.add_row(escape(p.name), escape(" ".join(p.matchers)) or "-", p.source)
    console.print(table)


if __name__ == "__main__":
    main()
