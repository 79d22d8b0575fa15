"""Run events.

The services report progress through a `RunObserver` instead of printing.
The console renderer is one subscriber; tests use the no-op default or a
recorder.

Every method has a no-op default, so a subscriber only overrides what it
needs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from core.domain.models import (
        CodingStandard,
        PromotionResult,
        Repository,
        RunReport,
        StandardReport,
        ToggleOutcome,
    )
    from core.services.run_controller import RunRequest


class RunObserver(Protocol):
    def on_run_start(self, request: "RunRequest") -> None:
        return None

    def on_standards_resolved(self, standards: Sequence["CodingStandard"]) -> None:
        return None

    def on_standard_start(self, standard: "CodingStandard") -> None:
        return None

    def on_standard_skipped(self, standard: "CodingStandard") -> None:
        return None

    def on_draft_created(self, source: "CodingStandard", draft: "CodingStandard | None") -> None:
        """`draft` is None in a dry run (the draft would have been created)."""

        return None

    def on_tools_listed(self, context: str, count: int) -> None:
        return None

    def on_tool_update(self, context: str, tool_id: str, tool_name: str | None, *, dry_run: bool) -> None:
        return None

    def on_tool_failed(self, context: str, tool_id: str, error: Exception) -> None:
        return None

    def on_toggle_complete(self, outcome: "ToggleOutcome") -> None:
        return None

    def on_promotion_result(self, standard_id: int, result: "PromotionResult | None") -> None:
        """`result` is None in a dry run."""

        return None

    def on_standard_failed(self, standard: "CodingStandard", error: Exception) -> None:
        return None

    def on_standard_done(self, report: "StandardReport") -> None:
        return None

    def on_detached_found(self, repositories: Sequence["Repository"]) -> None:
        return None

    def on_repository_start(self, repository: "Repository") -> None:
        return None

    def on_repository_failed(self, repository: "Repository", error: Exception) -> None:
        return None

    def on_detached_failed(self, error: Exception) -> None:
        return None

    def on_run_complete(self, report: "RunReport") -> None:
        return None


class NullObserver(RunObserver):
    """Subscriber that ignores every event."""
