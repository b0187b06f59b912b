"""CLI commands: clawshield check-update / install-update."""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clawshield.actions import LogNotifier, default_notifier
from clawshield.config import ShieldConfig
from clawshield.storage.preferences import Preferences
from clawshield.updates.checker import UpdateChecker

console = Console(stderr=True)


def build_checker(config: ShieldConfig, notify: bool = False) -> UpdateChecker:
    notifier = default_notifier() if notify else LogNotifier()
    return UpdateChecker(config, Preferences(config.preferences_path), notifier)


@click.command("check-update")
@click.option("--install", is_flag=True, help="Install the update if one is available.")
@click.option("--notify", is_flag=True, help="Show the desktop update prompt.")
@click.pass_context
def check_update(ctx: click.Context, install: bool, notify: bool) -> None:
    """Compare the installed OpenClaw CLI with the latest npm release."""
    config = ctx.obj["config"]
    checker = build_checker(config, notify=notify)

    with console.status("Checking for updates..."):
        available = checker.check_for_updates(notify=notify)

    _print_versions(checker)

    if not available:
        return
    if not checker.has_update:
        # Installed from the update prompt; any install message was printed above
        console.print(f"[green]OpenClaw is now {escape(checker.installed_version)}[/green]")
        return
    if install:
        _install(checker)
    else:
        console.print(
            f"\n[cyan]OpenClaw {checker.latest_version} is available[/cyan] "
            "— run [bold]clawshield install-update[/bold]"
        )


@click.command("install-update")
@click.pass_context
def install_update(ctx: click.Context) -> None:
    """Install the latest OpenClaw CLI with npm."""
    checker = build_checker(ctx.obj["config"])
    _install(checker)


def _install(checker: UpdateChecker) -> None:
    with console.status("Installing openclaw@latest..."):
        ok = checker.install_update()

    message = checker.error_message
    if ok:
        console.print(f"[green]OpenClaw is now {escape(checker.installed_version)}[/green]")
        if message:
            console.print(f"[yellow]{escape(message)}[/yellow]")
        return

    console.print(f"[red]{escape(message or 'Update failed')}[/red]")
    sys.exit(1)


def _print_versions(checker: UpdateChecker) -> None:
    snap = checker.snapshot()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()

    table.add_row("Installed", escape(snap.installed_version))
    table.add_row("Latest", escape(snap.latest_version))
    table.add_row(
        "Checked",
        snap.last_check_time.strftime("%Y-%m-%d %H:%M:%S") if snap.last_check_time else "Never",
    )
    console.print(table)

    if snap.error_message:
        console.print(f"[yellow]{escape(snap.error_message)}[/yellow]")
