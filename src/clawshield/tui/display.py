"""Dashboard display — builds Rich renderables from DashboardState."""

from __future__ import annotations

from datetime import datetime

from rich.console import Group
from rich.layout import Layout
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from clawshield.scanner.engine import ScanSnapshot
from clawshield.scanner.models import Issue, Severity
from clawshield.tui.state import DashboardState, ViewMode
from clawshield.updates.checker import UpdateSnapshot

_SECTIONS = (
    (Severity.CRITICAL, "Critical Issues", "red"),
    (Severity.WARNING, "Warnings", "yellow"),
    (Severity.INFO, "Notes", "blue"),
)


def format_time(when: datetime | None) -> str:
    return when.strftime("%H:%M") if when else "Never"


class DashboardDisplay:
    """Builds Rich Layout objects from the current DashboardState."""

    def render(self, state: DashboardState, height: int = 24, width: int = 80) -> Layout:
        """Build the full screen layout from current state."""
        scan, update = state.snapshot()

        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=4),
        )

        layout["header"].update(self._render_header(scan, update))

        if state.mode == ViewMode.OVERVIEW:
            layout["body"].update(self._render_overview(state, scan, height - 7))
        elif state.mode == ViewMode.UPDATES:
            layout["body"].update(self._render_updates(state, update))
        elif state.mode == ViewMode.HELP:
            layout["body"].update(self._render_help())

        layout["footer"].update(self._render_footer(state, scan))
        return layout

    def _render_header(self, scan: ScanSnapshot, update: UpdateSnapshot) -> Panel:
        status = scan.status
        line = (
            f"[{status.color}]{status.glyph}[/{status.color}] "
            f"[bold]OpenClaw Shield[/bold]   "
            f"[{status.color}]{status.label}[/{status.color}]"
        )
        if scan.is_scanning:
            line += "   [dim]scanning…[/dim]"
        if update.has_update:
            line += f"   [cyan]update {escape(update.latest_version)} available[/cyan]"
        return Panel(Text.from_markup(line), style="bold")

    def _render_overview(self, state: DashboardState, scan: ScanSnapshot, body_height: int) -> Panel:
        if scan.is_scanning:
            return Panel(
                Text("Scanning...", style="dim italic", justify="center"),
                title="Security Status",
                border_style="blue",
            )

        summary = Table.grid(expand=True)
        for _ in range(3):
            summary.add_column(justify="center", ratio=1)
        summary.add_row(
            f"[bold red]{len(scan.critical_issues)}[/bold red]",
            f"[bold yellow]{len(scan.warning_issues)}[/bold yellow]",
            f"[bold blue]{scan.skills_tracked}[/bold blue]",
        )
        summary.add_row("[dim]Critical[/dim]", "[dim]Warnings[/dim]", "[dim]Skills[/dim]")

        lines = self._overview_lines(scan)
        visible = max(1, body_height - 4)
        state.scroll(0, len(lines))
        window = lines[state.scroll_offset : state.scroll_offset + visible]

        scroll_info = ""
        if len(lines) > visible:
            end = min(state.scroll_offset + visible, len(lines))
            scroll_info = f" [{state.scroll_offset + 1}-{end}/{len(lines)}]"

        layout = Layout()
        layout.split_column(
            Layout(summary, size=3),
            Layout(Group(*window)),
        )
        return Panel(
            layout,
            title=f"Security Status — {scan.status.label}{scroll_info}",
            border_style=scan.status.color,
        )

    def line_count(self, state: DashboardState) -> int:
        """Number of scrollable lines in the overview for the current scan."""
        return len(self._overview_lines(state.scanner.snapshot()))

    def _overview_lines(self, scan: ScanSnapshot) -> list[Text]:
        lines = self._issue_lines(scan)
        if not scan.has_issues and scan.last_scan_time is None:
            return [Text("Waiting for first scan...", style="dim italic", justify="center")] + lines
        if not scan.has_issues:
            return [
                Text("✔ All checks passed!", style="bold green", justify="center"),
                Text(f"Last scan: {format_time(scan.last_scan_time)}", style="dim", justify="center"),
                Text(""),
            ] + lines
        return lines

    def _issue_lines(self, scan: ScanSnapshot) -> list[Text]:
        grouped = {
            Severity.CRITICAL: scan.critical_issues,
            Severity.WARNING: scan.warning_issues,
            Severity.INFO: scan.info_issues,
        }
        lines: list[Text] = []
        for severity, title, color in _SECTIONS:
            issues = grouped[severity]
            if not issues:
                continue
            lines.append(Text(title, style=f"bold {color}"))
            for issue in issues:
                lines.extend(_issue_rows(issue, color))
            lines.append(Text(""))
        return lines

    def _render_updates(self, state: DashboardState, update: UpdateSnapshot) -> Panel:
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style="dim")
        table.add_column()

        latest = escape(update.latest_version)
        if update.has_update:
            latest = f"[cyan bold]{latest}[/cyan bold] (update available)"

        table.add_row("Installed", escape(update.installed_version))
        table.add_row("Latest", latest)
        table.add_row("Last check", _format_datetime(update.last_check_time))
        if update.gateway_running is not None:
            table.add_row("Gateway", "running" if update.gateway_running else "not running")
        if update.is_checking:
            table.add_row("Status", "[dim]Checking...[/dim]")
        if update.is_updating:
            table.add_row("Status", f"[yellow]{escape(update.update_progress or 'Updating...')}[/yellow]")
        if update.error_message:
            table.add_row("Message", f"[yellow]{escape(update.error_message)}[/yellow]")

        hint = "[dim]c[/dim]:Check now"
        if update.has_update and not update.is_updating:
            hint += "  [bold]u[/bold]:Update Now"

        layout = Layout()
        layout.split_column(Layout(table), Layout(Text.from_markup(hint), size=1))
        return Panel(layout, title="OpenClaw Updates", border_style="cyan")

    def _render_help(self) -> Panel:
        help_text = Text.from_markup(
            "[bold]Key Bindings[/bold]\n"
            "\n"
            "  [cyan]r[/cyan]          Re-run the skills scan\n"
            "  [cyan]c[/cyan]          Check for OpenClaw updates\n"
            "  [cyan]u[/cyan]          Update Now (npm -g install openclaw@latest)\n"
            "  [cyan]Tab[/cyan]        Toggle overview / updates view\n"
            "  [cyan]j[/cyan] / [cyan]↓[/cyan]      Scroll issues down\n"
            "  [cyan]k[/cyan] / [cyan]↑[/cyan]      Scroll issues up\n"
            "  [cyan]Esc[/cyan]        Return to overview\n"
            "  [cyan]?[/cyan]          Toggle this help\n"
            "  [cyan]q[/cyan]          Quit\n"
        )
        return Panel(help_text, title="Help", border_style="green")

    def _render_footer(self, state: DashboardState, scan: ScanSnapshot) -> Panel:
        keys = (
            f"Skills: {scan.skills_tracked} tracked   "
            "[dim]r[/dim]:Rescan  [dim]c[/dim]:Check  [dim]u[/dim]:Update  "
            "[dim]Tab[/dim]:Updates  [dim]?[/dim]:Help  [dim]q[/dim]:Quit"
        )
        message = state.current_status()
        if message:
            keys += f"\n[yellow]{escape(message)}[/yellow]"
        return Panel(Text.from_markup(keys), style="dim")


def _issue_rows(issue: Issue, color: str) -> list[Text]:
    rows = [Text.assemble(("  ⚠ ", color), (issue.title, "bold"))]
    if issue.description:
        rows.append(Text(f"      {issue.description}", style="dim"))
    if issue.suggested_fix:
        rows.append(Text(f"      {issue.suggested_fix}", style="blue"))
    return rows


def _format_datetime(when: datetime | None) -> str:
    return when.strftime("%Y-%m-%d %H:%M:%S") if when else "Never"
