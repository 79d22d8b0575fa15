"""Security toggle run orchestration.

A run has two independent phases sharing only the overall exit status:

1. every resolved coding standard walks
   `RESOLVED -> {SKIPPED | DRAFT_READY} -> TOOLS_TOGGLED -> {PROMOTED | PROMOTION_SKIPPED}`,
   or ends in `FAILED` when draft creation, tool listing or promotion
   fails;
2. repositories following no coding standard get their tools toggled
   directly.

Progress is reported through a `RunObserver`; nothing here prints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from adapters.codacy_api import CodacyApi
from core.domain.actions import PatternAction
from core.domain.errors import TogglerError
from core.domain.models import (
    CodingStandard,
    PromotionResult,
    RunReport,
    StandardReport,
    StandardState,
    ToggleOutcome,
)
from core.interfaces.events import NullObserver, RunObserver
from core.services.detached import process_detached_repositories
from core.services.drafts import materialize_draft
from core.services.pattern_toggle import toggle_standard_patterns
from core.services.promotion import promote_standard
from core.services.standards import resolve_standards

logger = logging.getLogger(__name__)


@dataclass
class RunRequest:
    """Parameters that control a run."""

    organization: str
    provider: str = "gh"
    standard_id: int = 0
    enable: bool = True
    promote: bool = True
    skip_live: bool = False
    dry_run: bool = False
    page_size: int = 100
    max_pages: int = 1000

    @property
    def action(self) -> PatternAction:
        return PatternAction.from_bool(self.enable)


def process_standard(
    api: CodacyApi,
    standard: CodingStandard,
    *,
    request: RunRequest,
    observer: RunObserver | None = None,
) -> StandardReport:
    """Drive one standard to a terminal state.

    Fatal errors are captured into a `FAILED` report instead of raised, so
    the remaining standards still get processed.
    """

    observer = observer or NullObserver()
    observer.on_standard_start(standard)

    state = StandardState.RESOLVED
    target_id: int | None = None
    draft_created = False
    toggle: ToggleOutcome | None = None
    promotion: PromotionResult | None = None

    try:
        decision = materialize_draft(
            api,
            standard,
            skip_live=request.skip_live,
            dry_run=request.dry_run,
            observer=observer,
        )
        state = decision.state
        if state is StandardState.SKIPPED or decision.target is None:
            return StandardReport(
                standard_id=standard.id,
                standard_name=standard.name,
                state=StandardState.SKIPPED,
            )
        target_id = decision.target.id
        draft_created = decision.created

        toggle = toggle_standard_patterns(
            api,
            target_id,
            action=request.action,
            dry_run=request.dry_run,
            observer=observer,
        )
        state = StandardState.TOOLS_TOGGLED

        if not request.promote:
            state = StandardState.PROMOTION_SKIPPED
        elif request.dry_run:
            observer.on_promotion_result(target_id, None)
            state = StandardState.PROMOTION_SKIPPED
        else:
            promotion = promote_standard(api, target_id, observer=observer)
            state = StandardState.PROMOTED
    except TogglerError as exc:
        logger.debug("standard %d failed while %s", standard.id, state.value)
        observer.on_standard_failed(standard, exc)
        return StandardReport(
            standard_id=standard.id,
            standard_name=standard.name,
            state=StandardState.FAILED,
            target_id=target_id,
            draft_created=draft_created,
            toggle=toggle,
            error=str(exc),
        )

    return StandardReport(
        standard_id=standard.id,
        standard_name=standard.name,
        state=state,
        target_id=target_id,
        draft_created=draft_created,
        toggle=toggle,
        promotion=promotion,
    )


def process_standards(
    api: CodacyApi,
    standards: list[CodingStandard],
    *,
    request: RunRequest,
    observer: RunObserver | None = None,
) -> list[StandardReport]:
    observer = observer or NullObserver()
    reports: list[StandardReport] = []
    for standard in standards:
        report = process_standard(api, standard, request=request, observer=observer)
        observer.on_standard_done(report)
        reports.append(report)
    return reports


def run_security_toggle(
    api: CodacyApi,
    request: RunRequest,
    *,
    observer: RunObserver | None = None,
) -> RunReport:
    """Run both phases and aggregate the outcome.

    A resolution error aborts the run and propagates. Everything after it
    is captured in the returned report; `RunReport.failed` tells whether
    the process should exit non-zero.
    """

    observer = observer or NullObserver()
    observer.on_run_start(request)

    standards = resolve_standards(api, request.standard_id)
    observer.on_standards_resolved(standards)

    standard_reports = process_standards(api, standards, request=request, observer=observer)

    detached = process_detached_repositories(
        api,
        action=request.action,
        dry_run=request.dry_run,
        page_size=request.page_size,
        max_pages=request.max_pages,
        observer=observer,
    )

    report = RunReport(
        organization=request.organization,
        provider=request.provider,
        enable=request.enable,
        dry_run=request.dry_run,
        standards=standard_reports,
        detached=detached,
    )
    observer.on_run_complete(report)
    return report
