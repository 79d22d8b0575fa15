"""Bulk toggle of Security-category patterns, one tool at a time.

A coding standard and a repository expose their tools through different
endpoints, but the per-tool loop is the same: update every tool, keep
going when one fails, and fold the results into a `ToggleOutcome`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from adapters.codacy_api import CodacyApi
from core.domain.actions import PatternAction
from core.domain.errors import TransportError
from core.domain.models import ToggleOutcome
from core.interfaces.events import NullObserver, RunObserver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolRef:
    uuid: str
    name: str | None = None


def toggle_tools(
    *,
    context: str,
    tools: Sequence[ToolRef],
    update: Callable[[str, bool], None],
    action: PatternAction,
    dry_run: bool = False,
    observer: RunObserver | None = None,
) -> ToggleOutcome:
    """Apply `update(tool_uuid, enabled)` to each tool in listing order.

    A failing update is recorded and the loop moves on to the next tool.
    In a dry run `update` is never called and every tool counts as updated.
    """

    observer = observer or NullObserver()
    updated = 0
    failed: list[str] = []

    for tool in tools:
        observer.on_tool_update(context, tool.uuid, tool.name, dry_run=dry_run)
        if dry_run:
            updated += 1
            continue
        try:
            update(tool.uuid, action.enabled)
        except TransportError as exc:
            logger.info("%s: could not update tool %s: %s", context, tool.uuid, exc)
            observer.on_tool_failed(context, tool.uuid, exc)
            failed.append(tool.uuid)
            continue
        updated += 1

    outcome = ToggleOutcome(context=context, updated=updated, failed_tools=tuple(failed), dry_run=dry_run)
    observer.on_toggle_complete(outcome)
    return outcome


def toggle_standard_patterns(
    api: CodacyApi,
    standard_id: int,
    *,
    action: PatternAction,
    dry_run: bool = False,
    observer: RunObserver | None = None,
) -> ToggleOutcome:
    """Toggle every tool of a (draft) coding standard.

    A tool listing error propagates: without the list there is nothing to
    isolate failures over.
    """

    observer = observer or NullObserver()
    context = f"standard {standard_id}"
    tools = [ToolRef(uuid=t.uuid) for t in api.list_coding_standard_tools(standard_id)]
    observer.on_tools_listed(context, len(tools))

    def update(tool_uuid: str, enabled: bool) -> None:
        api.update_security_patterns(standard_id, tool_uuid, enabled=enabled)

    return toggle_tools(
        context=context,
        tools=tools,
        update=update,
        action=action,
        dry_run=dry_run,
        observer=observer,
    )


def toggle_repository_patterns(
    api: CodacyApi,
    repository_name: str,
    *,
    action: PatternAction,
    dry_run: bool = False,
    observer: RunObserver | None = None,
) -> ToggleOutcome:
    """Toggle every tool configured directly on a repository."""

    observer = observer or NullObserver()
    context = f"repository {repository_name}"
    tools = [ToolRef(uuid=t.uuid, name=t.name or None) for t in api.list_repository_tools(repository_name)]
    observer.on_tools_listed(context, len(tools))

    def update(tool_uuid: str, enabled: bool) -> None:
        api.update_repository_security_patterns(repository_name, tool_uuid, enabled=enabled)

    return toggle_tools(
        context=context,
        tools=tools,
        update=update,
        action=action,
        dry_run=dry_run,
        observer=observer,
    )
