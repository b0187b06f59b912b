"""CLI command: clawshield watch — periodic scans and update checks."""

from __future__ import annotations

import signal
import sys

import click
from rich.console import Console
from rich.markup import escape

from clawshield.actions import default_notifier
from clawshield.cli.scan import SEVERITY_COLORS
from clawshield.config import ShieldConfig
from clawshield.monitor import MonitorManager
from clawshield.scanner.engine import SkillScanner
from clawshield.scanner.models import ScanResult
from clawshield.storage.preferences import Preferences
from clawshield.updates.checker import UpdateChecker

console = Console(stderr=True)


@click.command()
@click.option("--no-tui", is_flag=True, help="Disable the interactive dashboard.")
@click.pass_context
def watch(ctx: click.Context, no_tui: bool) -> None:
    """Scan skills every 30 minutes and check for updates every 4 hours."""
    config: ShieldConfig = ctx.obj["config"]
    use_tui = sys.stderr.isatty() and sys.stdin.isatty() and not no_tui

    scanner = SkillScanner(config)
    checker = UpdateChecker(
        config, Preferences(config.preferences_path), default_notifier()
    )

    if use_tui:
        _watch_with_tui(config, scanner, checker)
    else:
        _watch_plain(config, scanner, checker)


def _watch_plain(
    config: ShieldConfig, scanner: SkillScanner, checker: UpdateChecker
) -> None:
    console.print(
        f"[bold]ClawShield[/bold] watching [cyan]{config.resolved_monitor_script}[/cyan]"
    )
    console.print(
        f"  Scan every {config.scan_interval / 60:.0f} min, "
        f"update check every {config.update_check_interval / 3600:.1f} h"
    )
    console.print("  Press Ctrl+C to stop.\n")

    def on_scan(result: ScanResult) -> None:
        status = result.status
        console.print(
            f"  [{status.color}]{status.glyph} {status.label}[/{status.color}] "
            f"{result.skills_tracked} skills tracked"
        )
        for issue in result.issues:
            color = SEVERITY_COLORS[issue.severity]
            console.print(f"    [{color}]{issue.severity.value:<8}[/{color}] {escape(issue.title)}")

    def on_update(available: bool) -> None:
        snap = checker.snapshot()
        if available:
            console.print(
                f"  [cyan]Update available:[/cyan] {escape(snap.latest_version)} "
                f"(installed {escape(snap.installed_version)})"
            )
        else:
            console.print(f"  [dim]OpenClaw {escape(snap.installed_version)} is up to date[/dim]")
        if snap.error_message:
            console.print(f"  [yellow]{escape(snap.error_message)}[/yellow]")

    manager = MonitorManager(
        scanner,
        checker,
        scan_interval=config.scan_interval,
        update_interval=config.update_check_interval,
        on_scan=on_scan,
        on_update=on_update,
    )

    def _signal_handler(signum: int, frame: object) -> None:
        console.print("\n[dim]Stopping...[/dim]")
        manager.stop()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        manager.run_loop()
    except KeyboardInterrupt:
        manager.stop()


def _watch_with_tui(
    config: ShieldConfig, scanner: SkillScanner, checker: UpdateChecker
) -> None:
    from clawshield.tui.app import DashboardApp
    from clawshield.tui.state import DashboardState

    manager = MonitorManager(
        scanner,
        checker,
        scan_interval=config.scan_interval,
        update_interval=config.update_check_interval,
    )
    state = DashboardState(scanner=scanner, checker=checker)

    manager.start()

    app = DashboardApp(state=state, manager=manager)
    app.run()

    manager.stop()
    manager.join(timeout=5)
