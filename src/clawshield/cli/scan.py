"""CLI command: clawshield scan — one skills-baseline check."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from clawshield.scanner.engine import SkillScanner
from clawshield.scanner.models import ScanResult, Severity

console = Console(stderr=True)

SEVERITY_COLORS = {
    Severity.INFO: "blue",
    Severity.WARNING: "yellow",
    Severity.CRITICAL: "red",
}

SEVERITY_ORDER = {
    Severity.CRITICAL: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}


@click.command()
@click.option(
    "--script",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to monitor-skills.sh (overrides config).",
)
@click.option(
    "--baseline",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the skills baseline file (overrides config).",
)
@click.pass_context
def scan(ctx: click.Context, script: Path | None, baseline: Path | None) -> None:
    """Check installed skills against the saved baseline."""
    config = ctx.obj["config"]
    if script is not None:
        config.monitor_script = script
    if baseline is not None:
        config.baseline_path = baseline

    console.print(
        f"[bold]ClawShield[/bold] checking skills with "
        f"[cyan]{config.resolved_monitor_script}[/cyan]\n"
    )

    result = SkillScanner(config).run_scan()

    if not result.issues:
        console.print("[green]All checks passed![/green]")
        _print_summary(result)
        return

    issues = sorted(result.issues, key=lambda i: SEVERITY_ORDER.get(i.severity, 9))

    table = Table(title="Issues", show_lines=False)
    table.add_column("Severity", style="bold", width=10)
    table.add_column("Issue")
    table.add_column("Details", max_width=50)
    table.add_column("Suggested fix", style="blue")

    for issue in issues:
        color = SEVERITY_COLORS.get(issue.severity, "white")
        table.add_row(
            f"[{color}]{issue.severity.value}[/{color}]",
            issue.title,
            issue.description or "",
            issue.suggested_fix or "",
        )

    console.print(table)
    _print_summary(result)

    critical_count = len(result.by_severity(Severity.CRITICAL))
    if critical_count > 0:
        console.print(f"\n[red]{critical_count} critical issue(s)[/red]")
        sys.exit(1)


def _print_summary(result: ScanResult) -> None:
    status = result.status
    console.print(
        f"\nStatus: [{status.color}]{status.label}[/{status.color}]   "
        f"Skills: {result.skills_tracked} tracked   "
        f"({result.duration:.2f}s)"
    )
