"""bin/sync — Sync fingerprint and account reference tool.

Fingerprints receipt/bill files, compares them with the sync ledger,
records successful pushes, and repairs account references in settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table

from hound_sync.lib.accounts import apply_settings_update, sanitize_account_settings
from hound_sync.lib.canonical import canonicalize
from hound_sync.lib.config import HoundConfig, load_entry
from hound_sync.lib.errors import SyncError
from hound_sync.lib.fingerprint import fingerprint as compute_fingerprint
from hound_sync.lib.fingerprint import store_identity_hash
from hound_sync.lib.logging_setup import configure_logging
from hound_sync.lib.state import SyncLedger
from hound_sync.lib.sync_plan import SyncStatus, mark_pushed, plan_sync

console = Console()

CONFIG_DIR_NAME = ".hound-sync"

_STATUS_STYLE = {
    SyncStatus.NO_CHANGE: "green",
    SyncStatus.NEEDS_SYNC: "yellow",
    SyncStatus.UNKNOWN: "red",
}


def get_project_root() -> Path:
    """Find the project root by looking for a .hound-sync directory."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        if (parent / CONFIG_DIR_NAME).is_dir():
            return parent
    return cwd


def get_config_dir(root: str | None) -> Path:
    project_root = Path(root) if root else get_project_root()
    return project_root / CONFIG_DIR_NAME


def get_ledger(root: str | None) -> SyncLedger:
    return SyncLedger(get_config_dir(root) / "state" / "sync_ledger.sqlite")


def _fail(e: Exception) -> NoReturn:
    click.echo(f"Error: {e}", err=True)
    raise SystemExit(1)


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: HOUND_SYNC_LOG_LEVEL or WARNING)")
def main(log_level: str | None) -> None:
    """hound-sync — change detection and account reference repair for accounting sync."""
    configure_logging(log_level)


@main.command()
@click.argument("record_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--show-payload", is_flag=True, help="Print the canonical payload before the digest")
def fingerprint(record_file: str, show_payload: bool) -> None:
    """Print the sync fingerprint of a receipt or bill file."""
    try:
        entry = load_entry(Path(record_file))
        payload = canonicalize(entry.record, entry.line_items)
        fp = compute_fingerprint(payload)
    except SyncError as e:
        _fail(e)
    if show_payload:
        click.echo(payload.to_json())
    click.echo(fp)


@main.command()
@click.argument("record_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--root", default=None, help="Project root directory")
def status(record_files: tuple[str, ...], root: str | None) -> None:
    """Show which records changed since their last sync."""
    try:
        entries = [load_entry(Path(f)) for f in record_files]
        with get_ledger(root) as ledger:
            plans = plan_sync(entries, ledger)
    except SyncError as e:
        _fail(e)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("File", width=18)
    table.add_column("Kind", width=7)
    table.add_column("Record", width=10)
    table.add_column("Status", width=10, no_wrap=True)
    table.add_column("Fingerprint", width=16)

    for path, plan in zip(record_files, plans):
        table.add_row(
            Path(path).name,
            plan.kind,
            plan.record_id,
            plan.status.value,
            (plan.fingerprint or "")[:16],
            style=_STATUS_STYLE[plan.status],
        )
    console.print(table)

    pending = sum(1 for p in plans if p.status is SyncStatus.NEEDS_SYNC)
    unknown = sum(1 for p in plans if p.status is SyncStatus.UNKNOWN)
    console.print(f"\n[bold]Needs sync:[/bold] {pending}")
    if unknown:
        console.print(f"[red]Fingerprint unknown:[/red] {unknown} (not safe to mark synced)")


@main.command("mark-synced")
@click.argument("record_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--root", default=None, help="Project root directory")
def mark_synced(record_files: tuple[str, ...], root: str | None) -> None:
    """Record current fingerprints after a successful push."""
    try:
        entries = [load_entry(Path(f)) for f in record_files]
        with get_ledger(root) as ledger:
            plans = plan_sync(entries, ledger)
            marked = mark_pushed(plans, ledger)
    except SyncError as e:
        _fail(e)

    click.echo(f"Marked {marked} record(s) as synced.")
    skipped = [p.record_id for p in plans if p.status is SyncStatus.UNKNOWN]
    if skipped:
        click.echo(f"Skipped (fingerprint unknown): {', '.join(skipped)}", err=True)


@main.command()
@click.option("--root", default=None, help="Project root directory")
@click.option("--write", is_flag=True, help="Save the repaired settings to settings.yaml")
def sanitize(root: str | None, write: bool) -> None:
    """Repair account references in settings against accounts.yaml."""
    try:
        config = HoundConfig(get_config_dir(root))
    except SyncError as e:
        _fail(e)
    update = sanitize_account_settings(config.settings, config.account_ids())

    for key, value in update.items():
        before = getattr(config.settings, key)
        marker = "" if before == value else f"  (was {before!r})"
        click.echo(f"{key}: {value!r}{marker}")

    if write:
        config.settings = apply_settings_update(config.settings, update)
        config.save_settings()
        click.echo(f"Saved {config.settings_path}")


@main.command("store-id")
@click.argument("store_id")
@click.argument("change_id")
@click.argument("end_date")
def store_id_cmd(store_id: str, change_id: str, end_date: str) -> None:
    """Print the external accounting key for a store and period."""
    try:
        click.echo(store_identity_hash(store_id, change_id, end_date))
    except SyncError as e:
        _fail(e)


if __name__ == "__main__":
    main()
