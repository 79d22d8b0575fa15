"""Repositories attached to no coding standard.

Their tools are configured per repository, so the second phase of a run
toggles them directly instead of going through a draft.
"""

from __future__ import annotations

import logging

from adapters.codacy_api import CodacyApi
from core.domain.actions import PatternAction
from core.domain.errors import PaginationError, TogglerError
from core.domain.models import DetachedPhaseReport, Repository, RepositoryReport
from core.interfaces.events import NullObserver, RunObserver
from core.services.pattern_toggle import toggle_repository_patterns

logger = logging.getLogger(__name__)


def list_all_repositories(api: CodacyApi, *, page_size: int, max_pages: int) -> list[Repository]:
    """Follow cursors until the service returns none.

    Raises `PaginationError` when a cursor repeats or `max_pages` pages
    have been requested without reaching the last one.
    """

    repositories: list[Repository] = []
    seen_cursors: set[str] = set()
    cursor: str | None = None
    pages = 0

    while True:
        if pages >= max_pages:
            raise PaginationError(f"listRepositoriesWithAnalysis: stopped after {max_pages} page(s)")
        page, cursor = api.list_repositories_page(limit=page_size, cursor=cursor)
        pages += 1
        repositories.extend(page)
        if cursor is None:
            break
        if cursor in seen_cursors:
            raise PaginationError(f"listRepositoriesWithAnalysis: cursor {cursor!r} returned twice")
        seen_cursors.add(cursor)

    logger.debug("listed %d repositories in %d page(s)", len(repositories), pages)
    return repositories


def scan_detached(api: CodacyApi, *, page_size: int = 100, max_pages: int = 1000) -> list[Repository]:
    """Full inventory first, then keep repositories following zero standards."""

    repositories = list_all_repositories(api, page_size=page_size, max_pages=max_pages)
    return [repo for repo in repositories if repo.is_detached]


def process_detached_repositories(
    api: CodacyApi,
    *,
    action: PatternAction,
    dry_run: bool = False,
    page_size: int = 100,
    max_pages: int = 1000,
    observer: RunObserver | None = None,
) -> DetachedPhaseReport:
    """Toggle Security patterns on every detached repository.

    A repository whose tools cannot be listed is reported as failed and the
    next one is processed. An inventory failure ends the phase.
    """

    observer = observer or NullObserver()
    try:
        detached = scan_detached(api, page_size=page_size, max_pages=max_pages)
    except TogglerError as exc:
        observer.on_detached_failed(exc)
        return DetachedPhaseReport(error=str(exc))

    observer.on_detached_found(detached)

    reports: list[RepositoryReport] = []
    for repo in detached:
        observer.on_repository_start(repo)
        try:
            outcome = toggle_repository_patterns(
                api,
                repo.name,
                action=action,
                dry_run=dry_run,
                observer=observer,
            )
        except TogglerError as exc:
            observer.on_repository_failed(repo, exc)
            reports.append(RepositoryReport(repository=repo.name, error=str(exc)))
            continue
        reports.append(RepositoryReport(repository=repo.name, toggle=outcome))

    return DetachedPhaseReport(repositories=reports)
