"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Tables and panels are shared by `toggle` and `doctor`.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import CodingStandard, RunReport, StandardState

_STATE_STYLES: dict[StandardState, str] = {
    StandardState.PROMOTED: "green",
    StandardState.PROMOTION_SKIPPED: "cyan",
    StandardState.TOOLS_TOGGLED: "cyan",
    StandardState.SKIPPED: "yellow",
    StandardState.FAILED: "bold red",
}


def print_banner(console: Console, *, lines: Sequence[tuple[str, str]] = ()) -> None:
    """Print the welcome banner with the run parameters underneath the title."""

    title = Text("Codacy Security Pattern Toggler", style="bold cyan")
    body = Text.assemble(title)
    for label, value in lines:
        body.append("\n")
        body.append(f"{label + ':':<14}", style="dim")
        body.append(value)
    console.print(Panel(Align.left(body), border_style="cyan", padding=(1, 4)))


def build_standards_table(standards: Sequence[CodingStandard]) -> Table:
    table = Table(title=f"Coding standards to process ({len(standards)})")
    table.add_column("ID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Name", style="white")
    table.add_column("Draft", style="magenta")
    table.add_column("Default", style="magenta")
    table.add_column("Tools", justify="right")
    table.add_column("Patterns", justify="right")
    for cs in standards:
        table.add_row(
            str(cs.id),
            escape(cs.name),
            "yes" if cs.is_draft else "no",
            "yes" if cs.is_default else "no",
            str(cs.meta.enabled_tools_count),
            str(cs.meta.enabled_patterns_count),
        )
    return table


def build_summary_table(report: RunReport) -> Table:
    """One row per processed standard and detached repository."""

    table = Table(title="Run summary")
    table.add_column("Unit", style="white")
    table.add_column("Result", no_wrap=True)
    table.add_column("Tools updated", justify="right")
    table.add_column("Failed tools", style="red")

    for s in report.standards:
        updated = f"{s.toggle.updated}/{s.toggle.total}" if s.toggle else "-"
        failed = ", ".join(s.toggle.failed_tools) if s.toggle else ""
        result = Text(s.state.value, style=_STATE_STYLES.get(s.state, "white"))
        table.add_row(escape(f"[{s.standard_id}] {s.standard_name}"), result, updated, escape(failed or (s.error or "")))

    for r in report.detached.repositories:
        updated = f"{r.toggle.updated}/{r.toggle.total}" if r.toggle else "-"
        failed = ", ".join(r.toggle.failed_tools) if r.toggle else ""
        result = Text("failed", style="bold red") if r.failed else Text("toggled", style="green")
        table.add_row(escape(f"repo {r.repository}"), result, updated, escape(failed or (r.error or "")))

    return table


def build_outcome_panel(report: RunReport) -> Panel:
    if report.failed:
        body = Text("Run finished with errors.", style="bold red")
        border = "red"
    else:
        body = Text("Run finished successfully.", style="bold green")
        border = "green"
    if report.failed_tool_count:
        body.append(f"\n{report.failed_tool_count} tool update(s) failed (reported, not fatal).", style="yellow")
    if report.dry_run:
        body.append("\nDry run: no changes were made.", style="dim")
    return Panel(body, border_style=border)
