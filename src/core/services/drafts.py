"""Draft materialization.

Only drafts can be edited, so a live (effective) standard is either
skipped or copied into a new draft before its tools are touched.
"""

from __future__ import annotations

from dataclasses import dataclass

from adapters.codacy_api import CodacyApi
from core.domain.models import CodingStandard, StandardState
from core.interfaces.events import NullObserver, RunObserver


@dataclass(frozen=True)
class DraftDecision:
    """Outcome of the draft step for one standard.

    `target` is the standard the next steps operate on. In a dry run with a
    live source it stays the source snapshot and is only read from.
    """

    state: StandardState
    target: CodingStandard | None
    created: bool = False
    simulated: bool = False


def materialize_draft(
    api: CodacyApi,
    standard: CodingStandard,
    *,
    skip_live: bool = False,
    dry_run: bool = False,
    observer: RunObserver | None = None,
) -> DraftDecision:
    observer = observer or NullObserver()

    if standard.is_draft:
        return DraftDecision(state=StandardState.DRAFT_READY, target=standard)

    if skip_live:
        observer.on_standard_skipped(standard)
        return DraftDecision(state=StandardState.SKIPPED, target=None)

    if dry_run:
        observer.on_draft_created(standard, None)
        return DraftDecision(state=StandardState.DRAFT_READY, target=standard, simulated=True)

    draft = api.create_draft_from_standard(standard)
    observer.on_draft_created(standard, draft)
    return DraftDecision(state=StandardState.DRAFT_READY, target=draft, created=True)
