"""Console renderer for run events."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.markup import escape

from cli.ui_components import build_standards_table
from core.domain.actions import PatternAction
from core.domain.models import (
    CodingStandard,
    PromotionResult,
    Repository,
    StandardReport,
    ToggleOutcome,
)
from core.interfaces.events import RunObserver

_DRY_RUN = "[dim]\\[dry-run][/dim]"


class ConsoleObserver(RunObserver):
    """Prints progress as the services report it.

    `verbose` adds one line per tool; dry-run lines are always printed.
    """

    def __init__(self, console: Console, *, action: PatternAction, verbose: bool = False) -> None:
        self._console = console
        self._action = action
        self._verbose = verbose

    def on_standards_resolved(self, standards: Sequence[CodingStandard]) -> None:
        if not standards:
            self._console.print("No coding standards found.\n")
            return
        self._console.print(build_standards_table(standards))
        self._console.print()

    def on_standard_start(self, standard: CodingStandard) -> None:
        self._console.print(f"[bold]==> {escape(repr(standard.name))} (ID {standard.id})[/bold]")

    def on_standard_skipped(self, standard: CodingStandard) -> None:
        self._console.print("    [yellow]Skipping: standard is not a draft and --skip-live is set[/yellow]")

    def on_draft_created(self, source: CodingStandard, draft: CodingStandard | None) -> None:
        if draft is None:
            self._console.print(f"    {_DRY_RUN} would create a draft from standard {source.id}")
            return
        self._console.print(f"    Draft created: {escape(repr(draft.name))} (ID {draft.id})")

    def on_tools_listed(self, context: str, count: int) -> None:
        self._console.print(f"    Tools found: {count}")

    def on_tool_update(self, context: str, tool_id: str, tool_name: str | None, *, dry_run: bool) -> None:
        label = escape(f"{tool_name} ({tool_id})" if tool_name else tool_id)
        if dry_run:
            self._console.print(f"    {_DRY_RUN} would {self._action.value} security patterns for tool {label}")
        elif self._verbose:
            self._console.print(f"    {self._action.progressive()} security patterns for tool {label}")

    def on_tool_failed(self, context: str, tool_id: str, error: Exception) -> None:
        self._console.print(f"    [yellow]warning:[/yellow] could not update tool {tool_id}: {escape(str(error))}")

    def on_toggle_complete(self, outcome: ToggleOutcome) -> None:
        self._console.print(
            f"    {self._action.progressive()} security patterns: "
            f"{outcome.updated}/{outcome.total} tool(s) updated"
        )
        if outcome.failed_tools:
            self._console.print(f"    [red]Failed tools:[/red] {escape(', '.join(outcome.failed_tools))}")

    def on_promotion_result(self, standard_id: int, result: PromotionResult | None) -> None:
        if result is None:
            self._console.print(f"    {_DRY_RUN} would promote draft standard {standard_id}")
            return
        self._console.print("    [green]Promoted successfully![/green]")
        if result.successful:
            self._console.print(f"    Applied to {len(result.successful)} repo(s): {escape(', '.join(result.successful))}")
        if result.failed:
            self._console.print(f"    [red]Failed for {len(result.failed)} repo(s):[/red] {escape(', '.join(result.failed))}")

    def on_standard_failed(self, standard: CodingStandard, error: Exception) -> None:
        self._console.print(f"    [bold red]error processing {escape(repr(standard.name))} (ID {standard.id}):[/bold red] {escape(str(error))}")

    def on_standard_done(self, report: StandardReport) -> None:
        self._console.print()

    def on_detached_found(self, repositories: Sequence[Repository]) -> None:
        self._console.rule("Detached repositories (not following any coding standard)")
        if not repositories:
            self._console.print("No detached repositories found.\n")
            return
        self._console.print(f"Found {len(repositories)} detached repository(ies):")
        for repo in repositories:
            self._console.print(f"  - {escape(repo.name)}")
        self._console.print()

    def on_repository_start(self, repository: Repository) -> None:
        self._console.print(f"[bold]==> {escape(repository.name)}[/bold]")

    def on_repository_failed(self, repository: Repository, error: Exception) -> None:
        self._console.print(f"    [bold red]error listing tools for {escape(repository.name)}:[/bold red] {escape(str(error))}")

    def on_detached_failed(self, error: Exception) -> None:
        self._console.print(f"[bold red]error processing detached repositories:[/bold red] {escape(str(error))}")
