"""Promotion of a draft coding standard to effective status."""

from __future__ import annotations

from adapters.codacy_api import CodacyApi
from core.domain.models import PromotionResult
from core.interfaces.events import NullObserver, RunObserver


def promote_standard(
    api: CodacyApi,
    standard_id: int,
    *,
    observer: RunObserver | None = None,
) -> PromotionResult:
    """Promote `standard_id` with a single call.

    Errors propagate to the caller. The successful/failed repository lists
    are what Codacy reports; nothing is retried per repository.
    """

    observer = observer or NullObserver()
    result = api.promote_draft(standard_id)
    observer.on_promotion_result(standard_id, result)
    return result
